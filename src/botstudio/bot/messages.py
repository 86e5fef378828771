"""User-facing chat texts and operator log texts for the bot."""

START_COMMAND = "/start"

# Chat replies, rendered with the configured parse mode (Markdown by default).
WELCOME_TEXT = "🎨 *Welcome!* Send me an image with a caption describing the edit you want."
CAPTION_REQUIRED_TEXT = (
    "📸 Got the image! Now please send a *caption* with instructions on how to edit it."
)
EDIT_COMPLETE_CAPTION = "✅ *Edit complete!*"
NO_IMAGE_TEXT = "⚠️ Gemini didn't return an image. Try a clearer instruction."
FAILURE_TEXT = "❌ Sorry, an error occurred while processing your image."

# Operator log lines.
BOT_STARTED_LOG = "Bot started. Listening for messages..."
BOT_STOPPED_LOG = "Bot stopped."
IMAGE_RECEIVED_LOG = "Received image from Chat ID: {chat_id}"
DOWNLOADING_LOG = "Downloading image from Telegram..."
SENDING_TO_GEMINI_LOG = 'Sending to Gemini: "{prompt}"'
GEMINI_SUCCESS_LOG = "Gemini success! Sending back to Telegram..."
PIPELINE_ERROR_LOG = "Error: {error}"
POLLING_ERROR_LOG = "Polling error: {error}"
