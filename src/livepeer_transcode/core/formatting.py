"""Formatting helpers for CLI and log output."""

_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def format_file_size(size_bytes: int) -> str:
    """Format a file size in human-readable form.

    Args:
        size_bytes: File size in bytes.

    Returns:
        Formatted string (e.g., "4.2 GB", "128.0 MB", "1.5 KB", "512 B").
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    for unit in _SIZE_UNITS:
        size /= 1024
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            break
    return f"{size:.1f} {unit}"


def format_bitrate(bits_per_second: int) -> str:
    """Format a bitrate, e.g. 2_000_000 -> "2000 Kbit/s"."""
    return f"{bits_per_second // 1000} Kbit/s"
