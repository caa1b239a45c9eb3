"""Non-blocking keyboard input for the timer controls."""

import select
import sys
import termios
import tty


class KeyboardHandler:
    """Reads single keypresses from a cbreak-mode terminal without blocking."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.old_settings = None
        try:
            self.fd = self.stream.fileno()
        except (AttributeError, OSError, ValueError):
            self.fd = None
        self._setup()

    def _setup(self):
        """Setup terminal for non-blocking input."""
        if self.fd is None:
            return
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # Not a TTY (piped input, tests)
            self.old_settings = None

    def get_key(self) -> str | None:
        """
        Get a single keypress without blocking.

        Returns the lower-cased key or None if no key was pressed.
        """
        if self.fd is None:
            return None
        try:
            if select.select([self.stream], [], [], 0)[0]:
                key = self.stream.read(1)
                return key.lower() if key else None
        except (OSError, ValueError):
            return None
        return None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings is not None:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except termios.error:
                pass
            self.old_settings = None
