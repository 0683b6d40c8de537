from pods.pod import Session

__all__ = ["Session"]
