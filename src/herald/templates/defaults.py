"""Built-in notification templates registered on every service."""

from __future__ import annotations

from herald.templates.registry import Template, TemplateField

MAINTENANCE = Template(
    name="maintenance",
    title="🚧 Scheduled Maintenance",
    color="#ff9900",
    fields=(
        TemplateField("Start", "{startTime}", inline=True),
        TemplateField("Estimated end", "{endTime}", inline=True),
        TemplateField("Reason", "{reason}"),
        TemplateField("Impact", "{impact}"),
    ),
    footer="Thank you for your patience",
)

FEATURE = Template(
    name="feature",
    title="🆕 New Feature",
    color="#00ff88",
    fields=(
        TemplateField("Feature", "{feature}"),
        TemplateField("Description", "{description}"),
        TemplateField("How to use it", "{usage}"),
        TemplateField("Available for", "{plans}", inline=True),
    ),
    footer="Always more to come",
)

SECURITY = Template(
    name="security",
    title="🚨 Security Alert",
    color="#ff0000",
    fields=(
        TemplateField("Incident type", "{type}", inline=True),
        TemplateField("Severity", "{severity}", inline=True),
        TemplateField("Required actions", "{actions}"),
        TemplateField("More information", "{details}"),
    ),
    footer="Security team",
)

UPDATE = Template(
    name="update",
    title="📦 Update Available",
    color="#3498db",
    fields=(
        TemplateField("Version", "{version}", inline=True),
        TemplateField("Size", "{size}", inline=True),
        TemplateField("What's new", "{changelog}"),
        TemplateField("Fixes", "{bugfixes}"),
        TemplateField("Installation", "{instructions}"),
    ),
    footer="Automatic update recommended",
)

EVENT = Template(
    name="event",
    title="🎉 Special Event",
    color="#9932cc",
    fields=(
        TemplateField("Event", "{event}"),
        TemplateField("Date", "{date}", inline=True),
        TemplateField("Duration", "{duration}", inline=True),
        TemplateField("Rewards", "{rewards}"),
        TemplateField("How to join", "{participation}"),
    ),
    footer="Don't miss it!",
)

PROMOTION = Template(
    name="promotion",
    title="💎 Special Offer",
    color="#f39c12",
    fields=(
        TemplateField("Offer", "{offer}"),
        TemplateField("Discount", "{discount}", inline=True),
        TemplateField("Valid until", "{expires}", inline=True),
        TemplateField("Promo code", "{code}"),
        TemplateField("Terms", "{terms}"),
    ),
    footer="Limited time offer",
)

BUILTIN_TEMPLATES: tuple[Template, ...] = (
    MAINTENANCE,
    FEATURE,
    SECURITY,
    UPDATE,
    EVENT,
    PROMOTION,
)
