"""id3json - move ID3 tags and album art in and out of JSON sidecar files."""

__version__ = "0.3.0"
