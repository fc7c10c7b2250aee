"""MediaPipe hand landmark detection."""
