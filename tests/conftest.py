import os

# Settings are read at import time; keep tests off any real backend
os.environ["BACKEND"] = "memory"
os.environ["BLOB_BACKEND"] = "memory"
os.environ.setdefault("LOG_LEVEL", "WARNING")
