UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]


def format_size(num_bytes: float) -> str:
    """Render a byte count with base-1024 units, e.g. ``1536`` -> ``"1.5 KB"``.

    One decimal below TB, two from TB upward. Values beyond the PB range stay in PB.
    """
    if num_bytes == 0:
        return "0 B"

    # floor(log1024(n)) without floating point error at exact powers of 1024
    i = 0
    scaled = abs(num_bytes)
    while scaled >= 1024 and i < len(UNITS) - 1:
        scaled /= 1024
        i += 1

    precision = 2 if i >= 4 else 1
    return f"{num_bytes / 1024 ** i:.{precision}f} {UNITS[i]}"
