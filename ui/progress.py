import sys


class ConsoleProgress:
    """Best-effort progress cue: ``message...`` then ``message... done.`` or ``failed.``"""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.active = False
        self.message = ""

    def start(self, message: str):
        if self.active:
            return
        self.active = True
        self.message = message
        self.stream.write(f"⏳ {message}...\n")
        self.stream.flush()

    def stop(self, success: bool = True):
        if not self.active:
            return
        self.active = False
        marker = "✅" if success else "❌"
        self.stream.write(f"{marker} {self.message}... {'done' if success else 'failed'}.\n")
        self.stream.flush()


class NullProgress:
    def start(self, message: str):
        pass

    def stop(self, success: bool = True):
        pass
