"""NiceGUI chat interface for Indie Coach."""

import logging
import os
from datetime import datetime

from nicegui import app, events, ui
from pydantic import ValidationError

from indie_coach.agent.prompts import TOOL_SUGGESTIONS, TOPIC_SUGGESTIONS
from indie_coach.chat.controller import GUEST_MESSAGE_LIMIT, ChatController
from indie_coach.models.schemas import FilePart, Message, Role
from indie_coach.parsing.attachments import AttachmentError, read_attachment
from indie_coach.storage.store import CoachStorage, DuplicateAccountError
from indie_coach.ui.api_client import CoachApiClient
from indie_coach.ui.widgets import render_book_summary_card, render_model_text

logger = logging.getLogger(__name__)

API_KEY_GUIDANCE = (
    "The server has no Gemini API key. Add API_KEY (or GEMINI_API_KEY) to the "
    ".env file next to the app and restart it."
)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&family=Lato&family=Montserrat:wght@400;700&family=Oswald:wght@500&family=Playfair+Display:wght@700&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    body { font-family: 'Inter', sans-serif; background: #f5f5f5; min-height: 100vh; }

    .header { background: linear-gradient(135deg, #1e1b4b 0%, #4338ca 100%); }

    .message-user {
        background: linear-gradient(135deg, #4338ca 0%, #7c3aed 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #ffffff;
        color: #1f2937;
        border: 1px solid #e5e7eb;
        border-radius: 18px 18px 18px 4px;
    }
    .body--dark .message-assistant { background: #1f2937; color: #f3f4f6; border-color: #374151; }

    .avatar-user { background: linear-gradient(135deg, #4338ca 0%, #7c3aed 100%); }
    .avatar-assistant { background: #f97316; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #4338ca;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #4338ca; }

    .send-btn { background: linear-gradient(135deg, #4338ca 0%, #7c3aed 100%) !important; color: white !important; }

    /* Markdown styling */
    .message-assistant strong { font-weight: 600; }
    .message-assistant em { font-style: italic; }
    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant ul, .message-assistant ol { margin: 0.5rem 0; }
    .message-assistant a { color: #4f46e5; }

    /* Callouts */
    .callout { border-left: 4px solid; border-radius: 8px; padding: 0.75rem 1rem; margin: 0.75rem 0; }
    .callout-title { display: flex; align-items: center; gap: 0.4rem; font-weight: 700; margin-bottom: 0.25rem; }
    .callout-title .material-icons { font-size: 18px; }
    .callout-tip { background: #ecfdf5; border-color: #10b981; color: #065f46; }
    .callout-important { background: #fef2f2; border-color: #ef4444; color: #991b1b; }
    .callout-action { background: #eef2ff; border-color: #6366f1; color: #3730a3; }
</style>
"""


def _log_exception(e: Exception) -> None:
    logger.error(f"Unhandled UI error: {e}", exc_info=e)


app.on_exception(_log_exception)


def _time_label(message: Message) -> str:
    return datetime.fromtimestamp(message.timestamp / 1000).strftime("%I:%M %p")


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    # Tab storage is only available once the websocket is up
    await ui.context.client.connected()

    api = CoachApiClient()
    dark = ui.dark_mode()
    pending: dict[str, FilePart | None] = {"attachment": None}

    def refresh() -> None:
        page.refresh()

    controller = ChatController(
        storage=CoachStorage(app.storage.user, app.storage.tab),
        streamer=api.stream_chat,
        on_change=refresh,
    )

    # === Dialogs ===

    def open_sign_up() -> None:
        with ui.dialog() as dialog, ui.card().classes("w-96 p-6 gap-3"):
            ui.label("Create your account").classes("text-xl font-bold")
            if controller.messages and not controller.is_authenticated:
                ui.label("Your current conversation will be saved to your new account.").classes(
                    "text-sm text-gray-500"
                )
            first = ui.input("First name").classes("w-full")
            last = ui.input("Last name").classes("w-full")
            email = ui.input("Email").classes("w-full")
            error = ui.label().classes("text-sm text-red-600")

            def submit() -> None:
                try:
                    controller.sign_up(first.value, last.value, email.value)
                except DuplicateAccountError as e:
                    error.set_text(str(e))
                    return
                except ValidationError:
                    error.set_text("Please enter a valid email address.")
                    return
                dialog.close()

            ui.button("Sign Up", on_click=submit).classes("w-full send-btn")
        dialog.open()

    def open_login() -> None:
        with ui.dialog() as dialog, ui.card().classes("w-96 p-6 gap-3"):
            ui.label("Welcome back").classes("text-xl font-bold")
            email = ui.input("Email").classes("w-full")
            error = ui.label().classes("text-sm text-red-600")

            def submit() -> None:
                if not controller.login(email.value or ""):
                    error.set_text("No account found with that email. Please sign up.")
                    return
                dialog.close()

            ui.button("Log In", on_click=submit).classes("w-full send-btn")
        dialog.open()

    # === Chat pieces ===

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "music_note"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center shrink-0 {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_typing() -> None:
        with ui.row().classes("gap-1 py-1"):
            for _ in range(3):
                ui.element("div").classes("typing-dot")

    def render_message(message: Message) -> None:
        is_user = message.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        width = "max-w-[75%]" if is_user else "w-full max-w-[85%]"

        with ui.row().classes(f"w-full {align} gap-3 items-end no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes(f"{width} gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    file = message.first_file()
                    if file is not None:
                        with ui.row().classes("items-center gap-2 text-xs opacity-80"):
                            ui.icon("attach_file")
                            ui.label(file.name or "attachment")
                    text = message.text()
                    if is_user:
                        ui.label(text).classes("text-sm whitespace-pre-wrap")
                    elif text:
                        render_model_text(text, api)
                    else:
                        render_typing()
                ui.label(_time_label(message)).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def render_welcome() -> None:
        with ui.column().classes("w-full items-center gap-2 mb-6"):
            name = controller.user.first_name if controller.user else ""
            greeting = f"Welcome back, {name}!" if name else "Welcome to Indie Coach"
            ui.label(greeting).classes("text-3xl font-extrabold text-center")
            ui.label(
                "Your AI mentor for the business side of music. Ask anything or start below."
            ).classes("text-gray-500 text-center")

        if controller.show_book_summary:
            render_book_summary_card(controller.send_book_summary, controller.is_chat_locked)

        ui.label("Explore Topics").classes("font-bold text-lg mb-2")
        with ui.grid().classes("w-full grid-cols-2 md:grid-cols-3 gap-3 mb-6"):
            for suggestion in TOPIC_SUGGESTIONS:
                with ui.card().classes("cursor-pointer hover:shadow-md p-4").on(
                    "click", lambda s=suggestion: controller.send_topic(s)
                ):
                    ui.icon(suggestion.icon).classes("text-2xl text-indigo-600")
                    ui.label(suggestion.title).classes("font-semibold text-sm")

        ui.label("Interactive Tools").classes("font-bold text-lg mb-2")
        with ui.grid().classes("w-full grid-cols-1 md:grid-cols-2 gap-3"):
            for suggestion in TOOL_SUGGESTIONS:
                with ui.card().classes("cursor-pointer hover:shadow-md p-4").on(
                    "click", lambda s=suggestion: controller.send_topic(s)
                ):
                    with ui.row().classes("items-center gap-3"):
                        ui.icon(suggestion.icon).classes("text-2xl text-orange-500")
                        ui.label(suggestion.title).classes("font-semibold")

    def render_error_banner() -> None:
        if not controller.error_banner:
            return
        is_key_error = "API key" in controller.error_banner
        with ui.row().classes(
            "w-full items-start gap-3 p-4 rounded-lg bg-red-50 text-red-800 no-wrap"
        ):
            ui.icon("vpn_key" if is_key_error else "error_outline").classes("text-xl")
            with ui.column().classes("gap-1"):
                ui.label(controller.error_banner).classes("font-semibold text-sm")
                if is_key_error:
                    ui.label(API_KEY_GUIDANCE).classes("text-sm")

    def render_lock_banner() -> None:
        with ui.column().classes(
            "w-full items-center gap-2 p-5 rounded-lg bg-indigo-50 border border-indigo-200"
        ):
            ui.label(
                f"You've used your {GUEST_MESSAGE_LIMIT} free messages."
            ).classes("font-bold")
            ui.label("Create a free account to keep chatting and save your history.").classes(
                "text-sm text-gray-600"
            )
            ui.button("Sign Up to Continue", on_click=open_sign_up).classes("send-btn")

    # === Views ===

    def render_auth() -> None:
        with ui.column().classes("w-full min-h-screen items-center justify-center p-6"):
            with ui.card().classes("w-full max-w-md p-8 items-center gap-4"):
                with ui.element("div").classes(
                    "w-16 h-16 rounded-full avatar-assistant flex items-center justify-center"
                ):
                    ui.icon("music_note").classes("text-white text-3xl")
                ui.label("Indie Coach").classes("text-3xl font-extrabold")
                ui.label(
                    "Guidance on royalties, deals, branding, and touring for independent artists."
                ).classes("text-center text-gray-500")
                ui.button("Sign Up", on_click=open_sign_up).classes("w-full send-btn")
                ui.button("Log In", on_click=open_login).props("outline").classes("w-full")
                ui.button(
                    "Continue as Guest", on_click=controller.continue_as_guest
                ).props("flat").classes("w-full")

    def render_drawer() -> None:
        with ui.column().classes("w-full h-full gap-2"):
            ui.button("New Chat", icon="add", on_click=controller.new_chat).classes(
                "w-full send-btn"
            )
            ui.label("History").classes("text-xs font-semibold text-gray-500 uppercase mt-4")
            if not controller.is_authenticated:
                ui.label("Sign up to save your chats.").classes("text-sm text-gray-400")
            elif not controller.chat_history:
                ui.label("No saved chats yet.").classes("text-sm text-gray-400")
            for session in controller.chat_history:
                active = session.id == controller.active_chat_id
                with ui.row().classes(
                    "w-full items-center no-wrap rounded-lg px-2 "
                    + ("bg-indigo-100" if active else "hover:bg-gray-100")
                ):
                    ui.label(session.title).classes("flex-grow text-sm truncate cursor-pointer").on(
                        "click", lambda s=session: controller.select_chat(s.id)
                    )
                    ui.button(
                        icon="delete",
                        on_click=lambda s=session: controller.delete_chat(s.id),
                    ).props("flat round dense size=sm color=grey")
            ui.space()
            if controller.is_authenticated:
                user = controller.user
                ui.label(f"{user.first_name} {user.last_name}".strip() or user.email).classes(
                    "text-sm font-semibold"
                )
                ui.button("Log Out", icon="logout", on_click=controller.logout).props(
                    "flat"
                ).classes("w-full")
            else:
                ui.button("Sign Up", on_click=open_sign_up).classes("w-full send-btn")
                ui.button("Log In", on_click=open_login).props("flat").classes("w-full")

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        try:
            pending["attachment"] = read_attachment(e.file.name, e.file.content_type, content)
        except AttachmentError as err:
            pending["attachment"] = None
            ui.notify(str(err), type="negative")
        attachment_label.refresh()

    @ui.refreshable
    def attachment_label() -> None:
        attachment = pending["attachment"]
        if attachment is None:
            return
        with ui.row().classes("items-center gap-2 px-3 py-1 bg-indigo-50 rounded-full text-xs"):
            ui.icon("attach_file")
            ui.label(attachment.file.name or "attachment")

            def remove() -> None:
                pending["attachment"] = None
                attachment_label.refresh()

            ui.button(icon="close", on_click=remove).props("flat round dense size=xs")

    async def send_from_input() -> None:
        text = input_field.value or ""
        attachment = pending["attachment"]
        input_field.value = ""
        pending["attachment"] = None
        attachment_label.refresh()
        await controller.send_message(text, attachment)

    @ui.refreshable
    def page() -> None:
        if controller.view == "auth":
            header.set_visibility(False)
            drawer.hide()
            footer.set_visibility(False)
            render_auth()
            return

        header.set_visibility(True)
        footer.set_visibility(not controller.is_chat_locked)
        drawer_content.refresh()
        send_btn.set_enabled(not controller.is_loading)

        with ui.column().classes("w-full max-w-3xl mx-auto p-4 gap-4"):
            if not controller.messages:
                render_welcome()
            for message in controller.messages:
                render_message(message)
            render_error_banner()
            if controller.follow_up_prompts and not controller.is_loading:
                with ui.row().classes("w-full gap-2 pl-12"):
                    for prompt in controller.follow_up_prompts:
                        ui.chip(
                            prompt,
                            icon="chat_bubble_outline",
                            on_click=lambda p=prompt: controller.send_message(p),
                        ).props("outline clickable color=indigo")
            if controller.is_chat_locked:
                render_lock_banner()
        ui.run_javascript("window.scrollTo(0, document.body.scrollHeight)")

    # === UI Layout ===
    with ui.header().classes("header items-center justify-between px-4") as header:
        with ui.row().classes("items-center gap-2"):
            ui.button(icon="menu", on_click=lambda: drawer.toggle()).props("flat round color=white")
            ui.icon("music_note").classes("text-white text-2xl")
            ui.label("Indie Coach").classes("text-lg font-semibold text-white")
        with ui.row().classes("items-center gap-1"):
            ui.button(icon="dark_mode", on_click=dark.toggle).props("flat round color=white")
            ui.button(icon="add", on_click=controller.new_chat).props("flat round color=white")

    with ui.left_drawer(value=False).classes("p-4") as drawer:
        drawer_content = ui.refreshable(render_drawer)
        drawer_content()

    with ui.footer().classes("bg-white border-t p-3") as footer:
        with ui.column().classes("w-full max-w-3xl mx-auto gap-2"):
            attachment_label()
            with ui.row().classes("w-full gap-2 items-end no-wrap"):
                ui.upload(
                    on_upload=handle_upload,
                    auto_upload=True,
                    max_file_size=10 * 1024 * 1024,
                    on_rejected=lambda: ui.notify("File is too large (max 10MB).", type="negative"),
                ).props("accept=image/*,.pdf,.txt,.md,.csv flat").classes("w-32")
                with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                    input_field = (
                        ui.textarea(placeholder="Ask about royalties, deals, touring...")
                        .props("autogrow borderless dense rows=1")
                        .classes("w-full")
                        .on("keydown.enter.prevent", send_from_input)
                    )
                send_btn = (
                    ui.button(icon="send", on_click=send_from_input)
                    .props("round unelevated")
                    .classes("send-btn")
                )

    controller.restore()
    page()


def main() -> None:
    """Run the chat UI on its own server, talking to the API over HTTP."""
    ui.run(
        title="Indie Coach",
        port=int(os.getenv("UI_PORT", "8080")),
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "indie-coach-secret"),
    )


if __name__ == "__main__":
    main()
