from datetime import timedelta, timezone as dt_tz

JST = dt_tz(timedelta(hours=9))

def to_jst_iso(dt_utc):
    return dt_utc.astimezone(JST).isoformat()


def _count(value, unit):
    n = int(value + 0.5)
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def humanize_interval(days):
    """Short "next review in ..." text for an interval in days."""
    minutes = float(days) * 24 * 60
    if minutes < 10:
        return "< 10 min"
    if minutes < 60:
        return f"{int(minutes + 0.5)} min"
    if days < 1:
        return _count(minutes / 60, "hour")
    if days < 30:
        return _count(days, "day")
    if days < 365:
        return _count(days / 30, "month")
    return _count(days / 365, "year")
