"""Human-readable names for common content types."""
from __future__ import annotations

FRIENDLY_NAMES: dict[str, str] = {
    # Video
    "public.mp4": "MP4 Video",
    "public.mpeg": "MPEG Video",
    "public.avi": "AVI Video",
    "public.mov": "QuickTime Movie",
    "com.apple.quicktime-movie": "QuickTime Movie",
    "public.mpeg-4": "MPEG-4 Video",
    # Audio
    "public.mp3": "MP3 Audio",
    "public.wav": "WAV Audio",
    "public.aiff": "AIFF Audio",
    "public.m4a": "M4A Audio",
    "com.apple.m4a-audio": "M4A Audio",
    "public.audio": "Audio",
    # Images
    "public.jpeg": "JPEG Image",
    "public.png": "PNG Image",
    "public.gif": "GIF Image",
    "com.apple.pict": "PICT Image",
    "public.svg-image": "SVG Image",
    "public.tiff": "TIFF Image",
    # Documents
    "public.plain-text": "Plain Text",
    "public.text": "Text",
    "public.html": "HTML Document",
    "public.xml": "XML Document",
    "public.json": "JSON Document",
    "com.adobe.pdf": "PDF Document",
    "com.microsoft.word.doc": "Word Document",
    "org.openxmlformats.wordprocessingml.document": "Word Document",
    "public.rtf": "Rich Text Document",
    "public.markdown": "Markdown Document",
    # Source code
    "public.python-script": "Python Source",
    "public.javascript-source": "JavaScript Source",
    "public.ruby-script": "Ruby Source",
    "public.go-source": "Go Source",
    "public.rust-source": "Rust Source",
    "public.c-source": "C Source",
    "public.c-plus-plus-source": "C++ Source",
    "public.swift-source": "Swift Source",
    "public.java-source": "Java Source",
    "public.shell-script": "Shell Script",
    # Archives
    "public.zip-archive": "ZIP Archive",
    "org.gnu.gnu-zip-archive": "GZIP Archive",
    "public.tar-archive": "TAR Archive",
    "org.7-zip.7-zip-archive": "7Z Archive",
    "com.rarlab.rar-archive": "RAR Archive",
}


def friendly_name(content_type: str) -> str:
    return FRIENDLY_NAMES.get(content_type, content_type)
