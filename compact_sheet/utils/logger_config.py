import logging

MODULE_ID = "compact-beyond-5e-sheet"


class EmojiFormatter(logging.Formatter):
    """
    Log formatter that prepends a level emoji and the module id.
    """

    LEVEL_EMOJIS = {
        logging.DEBUG: "🐛",
        logging.INFO: "✅",
        logging.WARNING: "⚠️",
        logging.ERROR: "❌",
    }

    def format(self, record):
        s = super().format(record)
        emoji = self.LEVEL_EMOJIS.get(record.levelno, "")
        return f"{emoji} {MODULE_ID} | {s}"


def setup_logging(debug: bool = False):
    """
    Configure the root logger. Debug output is only shown when the debug
    setting is on; call once at the entry point.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        EmojiFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    # Avoid duplicate output when called again
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(console_handler)
