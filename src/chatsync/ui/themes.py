"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- Dark/light mode configuration

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Ocean Professional palette, light variant
OCEAN_LIGHT = Theme(
    name="ocean-light",
    primary="#2563EB",      # Blue - main accent, user messages
    secondary="#F59E0B",    # Amber - secondary actions, health marker
    accent="#0EA5E9",       # Sky - highlights
    foreground="#111827",   # Near-black text
    background="#f9fafb",   # Page background
    success="#16A34A",      # Green - send button
    warning="#D97706",      # Dark amber - warnings
    error="#EF4444",        # Red - errors, unhealthy provider
    surface="#ffffff",      # Cards and panels
    panel="#F3F4F6",        # Sidebar background
    dark=False,
    variables={
        "border": "#E5E7EB",
        "border-blurred": "#F3F4F6",

        "text-muted": "#6B7280",
        "text-disabled": "#9CA3AF",

        "input-selection-background": "#2563EB 25%",

        "scrollbar": "#E5E7EB",
        "scrollbar-hover": "#D1D5DB",
        "scrollbar-active": "#2563EB",
        "scrollbar-background": "#F3F4F6",

        "footer-background": "#F3F4F6",
        "footer-key-foreground": "#2563EB",
        "footer-description-foreground": "#4B5563",
    },
)

# Ocean Professional palette, dark variant
OCEAN_DARK = Theme(
    name="ocean-dark",
    primary="#3B82F6",
    secondary="#F59E0B",
    accent="#38BDF8",
    foreground="#e5e7eb",
    background="#0b1220",
    success="#22C55E",
    warning="#FBBF24",
    error="#F87171",
    surface="#111a2e",
    panel="#0f172a",
    dark=True,
    variables={
        "border": "#1F2937",
        "border-blurred": "#172033",

        "text-muted": "#9CA3AF",
        "text-disabled": "#4B5563",

        "input-selection-background": "#3B82F6 30%",

        "scrollbar": "#1F2937",
        "scrollbar-hover": "#374151",
        "scrollbar-active": "#3B82F6",
        "scrollbar-background": "#0f172a",

        "footer-background": "#0b1220",
        "footer-key-foreground": "#F59E0B",
        "footer-description-foreground": "#9CA3AF",
    },
)
