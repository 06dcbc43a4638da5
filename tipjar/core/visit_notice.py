"""Visit Notice - once-per-session token transitions and notification message text.

Invariants:
    - should_notify is True only for a fresh token with a valid configuration
    - begin_attempt marks the token attempted; no second attempt in the same load
    - record_failure leaves sent False; record_success makes sent permanent
    - Messages are Telegram HTML with the fixed field order of the visit alert

Design Decisions:
    - Token passed in and out of pure functions instead of a module-level flag,
      so two sessions in one process never share "sent" state
    - User agent parsing by substring checks, first match wins per field
"""

import re
from dataclasses import dataclass

from tipjar.core.session_state import NotificationToken

DIRECT_VISIT = "Direct visit"


def should_notify(token: NotificationToken, config_valid: bool) -> bool:
    return config_valid and not token.sent and not token.attempted


def begin_attempt(token: NotificationToken) -> NotificationToken:
    return NotificationToken(sent=token.sent, attempted=True)


def record_success(token: NotificationToken) -> NotificationToken:
    return NotificationToken(sent=True, attempted=True)


def record_failure(token: NotificationToken) -> NotificationToken:
    return NotificationToken(sent=False, attempted=True)


# ─── Visitor description ─────────────────────────────────────────

@dataclass(frozen=True)
class DeviceInfo:
    device_name: str = "Unknown Device"
    browser: str = "Unknown Browser"
    platform: str = "Unknown Platform"


@dataclass(frozen=True)
class ScreenInfo:
    resolution: str
    type: str


@dataclass(frozen=True)
class VisitInfo:
    """What the page reports about itself on load."""
    url: str
    timestamp: str
    referrer: str | None = None
    user_agent: str | None = None
    screen_width: int | None = None
    screen_height: int | None = None
    pixel_ratio: float = 1.0


def _versioned(user_agent: str, pattern: str, name: str, dots: bool = False) -> str:
    match = re.search(pattern, user_agent)
    if not match:
        return name
    version = match.group(1).replace("_", ".") if dots else match.group(1)
    return f"{name} {version}"


def _detect_platform(ua: str) -> str:
    if "Windows NT 10.0" in ua:
        return "Windows 10/11"
    if "Windows NT 6.3" in ua:
        return "Windows 8.1"
    if "Windows NT 6.1" in ua:
        return "Windows 7"
    if "Windows" in ua:
        return "Windows"
    if "Mac OS X" in ua:
        return _versioned(ua, r"Mac OS X ([\d_]+)", "macOS", dots=True)
    if "Linux" in ua:
        return "Linux"
    if "Android" in ua:
        return _versioned(ua, r"Android ([\d.]+)", "Android")
    if "iOS" in ua or "iPhone OS" in ua:
        return _versioned(ua, r"OS ([\d_]+)", "iOS", dots=True)
    return "Unknown Platform"


def _detect_browser(ua: str) -> str:
    if "Edg/" in ua:
        return _versioned(ua, r"Edg/([\d.]+)", "Edge")
    if "Chrome/" in ua:
        return _versioned(ua, r"Chrome/([\d.]+)", "Chrome")
    if "Firefox/" in ua:
        return _versioned(ua, r"Firefox/([\d.]+)", "Firefox")
    if "Safari/" in ua and "Chrome" not in ua:
        return _versioned(ua, r"Version/([\d.]+)", "Safari")
    if "Opera/" in ua or "OPR/" in ua:
        return _versioned(ua, r"(?:Opera/|OPR/)([\d.]+)", "Opera")
    return "Unknown Browser"


_IPHONES = (
    ("iPhone15", "iPhone 15"), ("iPhone14", "iPhone 14"), ("iPhone13", "iPhone 13"),
    ("iPhone12", "iPhone 12"), ("iPhone11", "iPhone 11"), ("iPhoneX", "iPhone X"),
)

_VENDORS = (
    ("Pixel", "Google Pixel"), ("OnePlus", "OnePlus"),
    ("Huawei", "Huawei"), ("Xiaomi", "Xiaomi"),
    ("Mobile", "Mobile Device"), ("Windows", "Windows PC"),
)


def _detect_device(ua: str) -> str:
    if "iPhone" in ua:
        return next((name for key, name in _IPHONES if key in ua), "iPhone")
    if "iPad" in ua:
        if "iPad13" in ua:
            return "iPad Pro"
        if "iPad11" in ua:
            return "iPad Air"
        return "iPad"
    if "Samsung" in ua:
        return "Samsung Galaxy" if "SM-G" in ua else "Samsung Device"
    for key, name in _VENDORS:
        if key in ua:
            return name
    if "Macintosh" in ua:
        return "MacBook" if "MacBook" in ua else "Mac"
    if "Linux" in ua:
        return "Linux PC"
    return "Desktop Computer"


def describe_device(user_agent: str | None) -> DeviceInfo:
    if not user_agent:
        return DeviceInfo()
    return DeviceInfo(
        device_name=_detect_device(user_agent),
        browser=_detect_browser(user_agent),
        platform=_detect_platform(user_agent),
    )


_SCREEN_CLASSES = (
    (768, "Mobile"), (1024, "Tablet"), (1366, "Laptop"),
    (1920, "Desktop"), (2560, "2K Monitor"), (3840, "4K Monitor"),
)


def classify_screen(
    width: int | None, height: int | None, pixel_ratio: float = 1.0,
) -> ScreenInfo:
    if width is None or height is None:
        return ScreenInfo(resolution="unknown", type="Unknown")
    screen_type = next(
        (label for limit, label in _SCREEN_CLASSES if width <= limit),
        "Ultra-wide/8K",
    )
    density = f" @{pixel_ratio:g}x" if pixel_ratio > 1 else ""
    return ScreenInfo(resolution=f"{width}x{height}{density}", type=screen_type)


# ─── Messages ────────────────────────────────────────────────────

def build_visit_message(visit: VisitInfo) -> str:
    device = describe_device(visit.user_agent)
    screen = classify_screen(visit.screen_width, visit.screen_height, visit.pixel_ratio)
    lines = [
        "🌐 <b>Website Visit Alert</b>",
        "",
        f"📅 <b>Time:</b> {visit.timestamp}",
        f"🔗 <b>URL:</b> {visit.url}",
        f"📱 <b>Device:</b> {device.device_name}",
        f"💻 <b>Browser:</b> {device.browser}",
        f"📺 <b>Screen:</b> {screen.resolution} ({screen.type})",
        f"🔄 <b>Referrer:</b> {visit.referrer or DIRECT_VISIT}",
        f"🌍 <b>Platform:</b> {device.platform}",
        "",
        "👤 <b>User opened the donation website!</b>",
    ]
    return "\n".join(lines)


def build_payment_message(
    timestamp: str, method: str = "Unknown", amount: object = "Unknown",
) -> str:
    lines = [
        "💰 <b>Payment Alert</b>",
        "",
        f"📅 <b>Time:</b> {timestamp}",
        f"💳 <b>Method:</b> {method}",
        f"💵 <b>Amount:</b> {amount}",
        "",
        "✅ <b>Payment successful!</b>",
    ]
    return "\n".join(lines)
