import os

# Run Qt headless so the pytest-qt ``qapp`` fixture works without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
