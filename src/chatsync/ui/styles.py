"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout:
- Sidebar on the left: model selector, new chat button, session history
- Main column: chat history, thinking indicator, input bar, trace log
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - Sidebar + Main Column
   ============================================ */
Screen {
    layout: horizontal;
    background: $background;
}

/* ============================================
   Sidebar - Models and Session History
   ============================================ */
#sidebar {
    width: 34;
    height: 100%;
    background: $panel;
    border-right: tall $border;
    padding: 1 1 0 1;
}

.sidebar-label {
    color: $text-muted;
    height: 1;
    margin-bottom: 1;
}

#model-select {
    width: 100%;
    margin-bottom: 1;
}

#new-chat {
    width: 100%;
    margin-bottom: 1;
    background: $secondary;
    color: $background;
    border: tall $secondary;
    text-style: bold;

    &:hover {
        background: $secondary-lighten-1;
        border: tall $secondary-lighten-1;
    }
}

#session-list {
    height: 1fr;
    background: $surface;
    border: round $border;
    border-title-color: $text-muted;
    padding: 0;

    &:focus {
        border: round $primary;
    }
}

SessionList > .option-list--option-highlighted {
    background: $primary 20%;
}

/* ============================================
   Main Column
   ============================================ */
#main {
    width: 1fr;
    height: 100%;
}

/* ============================================
   Chat History Panel - Primary Focus Area
   ============================================ */
#chat-history {
    height: 1fr;
    background: $surface;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

.empty-state {
    width: 100%;
    height: 100%;
    content-align: center middle;
    text-align: center;
    color: $text-muted;
}

#thinking {
    height: 1;
    padding: 0 2;
    color: $text-muted;
    text-style: italic;
}

/* ============================================
   Chat Messages - Conversation Display
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    border: none;
    background: transparent;
}

/* User messages - primary accent, right-leaning */
.user-message {
    border-left: tall $primary;
    background: $primary 10%;
    margin-left: 8;

    & .message-header {
        color: $primary;
        text-style: bold;
    }
}

/* Assistant messages - neutral surface */
.assistant-message {
    border-left: tall $secondary;
    background: $secondary 6%;
    margin-right: 8;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }
}

/* Synthetic send-failure messages */
.error-message {
    border-left: tall $error;
    background: $error 10%;
    margin-right: 8;

    & .message-header {
        color: $error;
        text-style: bold;
    }

    & .message-content {
        color: $error;
    }
}

.message-header {
    height: auto;
    padding: 0;
}

.message-content {
    height: auto;
    padding: 0;
    margin: 0;
    color: $foreground;
}

.message-footer {
    height: auto;
    margin-top: 1;
    color: $text-muted;
}

/* ============================================
   Chat Input Bar - Text Entry + Controls
   ============================================ */
ChatInputBar {
    height: auto;
    padding: 0 1;
    border: round $primary 60%;
    background: $surface;

    &:focus-within {
        border: round $primary;
    }

    &:disabled {
        border: round $border;
        opacity: 70%;
    }
}

#chat-input {
    height: 5;
    border: none;
    padding: 0 1;
    background: transparent;
}

#input-controls {
    height: 3;
}

#system-prompt {
    width: 1fr;
}

#attach-file, #attach-photo {
    min-width: 9;
    margin-left: 1;
}

#send-btn {
    width: 12;
    margin-left: 1;
    border: tall $success;
    background: $success;
    color: $background;
    text-style: bold;

    &:hover {
        background: $success-lighten-1;
        border: tall $success-lighten-1;
    }
}

#attachments-label {
    height: 1;
    color: $text-muted;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;

    &:focus {
        border: round $warning;
    }
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
        background: $primary 12%;
    }

    &.-error {
        border: tall $error;
        background: $error 12%;
    }

    &.-warning {
        border: tall $warning;
        background: $warning 12%;
    }
}

/* ============================================
   Header / Footer
   ============================================ */
Header {
    background: $panel;
    color: $foreground;
    dock: top;
    height: 1;
}

HeaderTitle {
    color: $primary;
    text-style: bold;
}

Footer {
    background: $panel;
    height: auto;
}

/* ============================================
   Markdown Content Styling
   ============================================ */
Markdown {
    margin: 0;
    padding: 0;
}

MarkdownFence {
    background: $panel;
    border: round $border;
    margin: 1 0;
    padding: 1;
}
"""
