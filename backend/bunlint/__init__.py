"""bunlint backend: Japanese sentence-ending style transforms via Gemini."""
