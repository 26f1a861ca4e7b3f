"""Constants and configuration for the lineview viewer."""

class ViewerConstants:
    """Central configuration constants for the viewer."""

    # Document layout
    TAB_STOP = 8  # Render columns between tab stops

    # Screen layout
    RESERVED_ROWS = 2  # Status bar + message bar
    FILLER_GLYPH = b"~"  # Marker for screen rows past the end of the document
    STATUS_FILENAME_WIDTH = 20  # Filename is truncated to this many characters
    NO_NAME = "[No Name]"
    WELCOME_MESSAGE = "Lineview -- Version {}"

    # Status messages
    STATUS_MESSAGE_TIMEOUT = 5  # Seconds a status message stays visible
    STATUS_MESSAGE_MAX_LENGTH = 80
    HELP_MESSAGE = "HELP: Ctrl-Q = quit"

    # Keyboard timing
    READ_TIMEOUT = 1  # VTIME in tenths of a second

    # Terminal responses
    CURSOR_REPORT_MAX_LENGTH = 32  # Guard against a misbehaving terminal
