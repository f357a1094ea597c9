import sys
from datetime import datetime

from .errors import ConfigurationError


class ConsoleLog:
    """Progress log that writes to the console and, optionally, a log file

    Console writes fall back to ASCII when the terminal cannot encode a
    character; the log file always receives the full UTF-8 text.
    """

    def __init__(self, out=None, err=None, log_file=None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.log_file = log_file
        if self.log_file:
            try:
                with open(self.log_file, "w", encoding="utf-8") as f:
                    f.write("BlockVerseDAO Project Deployment Log\n")
                    f.write(f"Started: {datetime.now().isoformat()}\n")
                    f.write("=" * 70 + "\n\n")
            except OSError as e:
                raise ConfigurationError(f"Cannot open log file {self.log_file}: {e}") from e

    def _write(self, stream, message):
        try:
            stream.write(message)
        except UnicodeEncodeError:
            stream.write(message.encode("ascii", "ignore").decode("ascii"))
        stream.flush()

        if self.log_file:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(message)

    def print(self, message=""):
        self._write(self.out, f"{message}\n")

    def step(self, message):
        self.print(f"\n[*] {message}")

    def ok(self, message):
        self.print(f"[OK] {message}")

    def info(self, message):
        self.print(f"[INFO] {message}")

    def warning(self, message):
        self.print(f"[WARNING] {message}")

    def rule(self, char="=", width=70):
        self.print(char * width)

    def error(self, message=""):
        self._write(self.err, f"{message}\n")
