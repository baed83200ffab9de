"""NiceGUI chat interface with raw text streaming."""

import os
import re
from collections.abc import Callable
from datetime import datetime

import httpx
from nicegui import events, ui

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

STREAM_ERROR_FALLBACK = "\n\n*Sorry, the response was interrupted. Please try again.*"

_LIST_ITEM = re.compile(r"^(?:[-*]|\d+\.)\s+")


def markdown_to_html(text: str) -> str:
    """Convert the markdown subset the assistant uses to HTML.

    Supports: bold, italic, inline code, code blocks, bulleted and numbered lists.
    """
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>\2</code></pre>',
        text,
    )
    text = re.sub(r"`([^`]+)`", r'<code class="bg-gray-200 px-1 rounded text-xs">\1</code>', text)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)

    result: list[str] = []
    open_tag: str | None = None
    for line in text.split("\n"):
        stripped = line.strip()
        match = _LIST_ITEM.match(stripped)
        tag = None if match is None else ("ol" if stripped[0].isdigit() else "ul")
        if open_tag and tag != open_tag:
            result.append(f"</{open_tag}>")
            open_tag = None
        if tag is None:
            result.append(line + "<br>")
            continue
        if open_tag is None:
            result.append(f'<{tag} class="list-inside my-1">')
            open_tag = tag
        result.append(f"<li>{stripped[match.end():]}</li>")
    if open_tag:
        result.append(f"</{open_tag}>")

    return "".join(result).removesuffix("<br>")


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #f5f5f5; }
    .sidebar { background: #111827; color: #e5e7eb; }
    .chat-item { border-radius: 8px; cursor: pointer; }
    .chat-item:hover { background: #1f2937; }
    .chat-item.active { background: #374151; }
    .message-user {
        background: #4f46e5;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .message-assistant strong { font-weight: 600; }
</style>
"""


class ChatState:
    """Client-side state for one browser tab."""

    def __init__(self) -> None:
        self.chats: list[dict] = []
        self.active_chat_id: str | None = None
        self.active_title: str = ""
        self.messages: list[dict] = []
        self.is_streaming: bool = False

    def add_message(self, role: str, content: str) -> dict:
        message = {"role": role, "content": content, "time": datetime.now().strftime("%I:%M %p")}
        self.messages.append(message)
        return message


def _format_time(iso_timestamp: str) -> str:
    try:
        return datetime.fromisoformat(iso_timestamp).strftime("%I:%M %p")
    except ValueError:
        return ""


async def fetch_chats() -> list[dict]:
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        response = await client.get("/api/chats")
        response.raise_for_status()
        return response.json()


async def fetch_messages(chat_id: str) -> list[dict]:
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        response = await client.get(f"/api/chats/{chat_id}/messages")
        response.raise_for_status()
        return [
            {"role": m["role"], "content": m["content"], "time": _format_time(m["createdAt"])}
            for m in response.json()
        ]


async def upload_file(filename: str, content: bytes, content_type: str | None) -> dict:
    """Upload a document and return the chat created for it."""
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as client:
        response = await client.post(
            "/api/upload",
            files={"file": (filename, content, content_type or "application/octet-stream")},
        )
        if response.is_error:
            raise RuntimeError(response.json().get("detail", "Upload failed"))
        return response.json()["chat"]


async def delete_chat(chat_id: str) -> None:
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        response = await client.delete(f"/api/chats/{chat_id}")
        response.raise_for_status()


async def stream_chat_response(
    chat_id: str,
    message: str,
    on_chunk: Callable[[str], None],
) -> None:
    """Stream a turn's raw text into on_chunk.

    Raises:
        httpx.HTTPStatusError: If the turn is rejected before streaming.
        httpx.RequestError: If the stream is cut short (treated as failure).
    """
    async with (
        httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as client,
        client.stream("POST", "/api/chat", json={"chatId": chat_id, "message": message}) as response,
    ):
        if response.is_error:
            await response.aread()
            response.raise_for_status()
        async for text in response.aiter_text():
            if text:
                on_chunk(text)


@ui.page("/")
async def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    state = ChatState()

    chat_list: ui.column
    messages_container: ui.column
    title_label: ui.label
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(msg: dict) -> ui.html:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = msg["content"].replace("&", "&amp;").replace("<", "&lt;")
                        content = content.replace("\n", "<br>")
                    else:
                        content = markdown_to_html(msg["content"])
                    body = ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                ui.label(msg["time"]).classes("text-[10px] text-gray-400")
        return body

    def refresh_messages() -> ui.html | None:
        """Re-render all messages and return the body of the last one."""
        last_body = None
        messages_container.clear()
        with messages_container:
            if state.active_chat_id is None:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("upload_file").classes("text-5xl text-gray-300")
                    ui.label("Upload a PDF to start chatting").classes("text-lg text-gray-400")
            for msg in state.messages:
                last_body = render_message(msg)
        title_label.set_text(state.active_title or "No document selected")
        return last_body

    def refresh_chat_list() -> None:
        chat_list.clear()
        with chat_list:
            if not state.chats:
                ui.label("No chats yet").classes("text-sm text-gray-400 px-2")
            for chat in state.chats:
                active = " active" if chat["id"] == state.active_chat_id else ""
                with ui.row().classes(f"w-full chat-item{active} px-2 py-1 items-center no-wrap"):
                    ui.label(chat["title"]).classes("flex-grow truncate text-sm").on(
                        "click", lambda c=chat: select_chat(c)
                    )
                    ui.button(icon="delete", on_click=lambda c=chat: remove_chat(c)).props(
                        "flat round dense size=sm color=grey"
                    )

    async def load_chats() -> None:
        try:
            state.chats = await fetch_chats()
        except httpx.HTTPError as e:
            ui.notify(f"Failed to load chat history: {e}", type="negative")
        refresh_chat_list()

    async def select_chat(chat: dict) -> None:
        if state.is_streaming:
            return
        state.active_chat_id = chat["id"]
        state.active_title = chat["title"]
        state.messages = []
        refresh_chat_list()
        try:
            state.messages = await fetch_messages(chat["id"])
        except httpx.HTTPError as e:
            ui.notify(f"Failed to load messages: {e}", type="negative")
        refresh_messages()

    async def remove_chat(chat: dict) -> None:
        try:
            await delete_chat(chat["id"])
        except httpx.HTTPError as e:
            ui.notify(f"Failed to delete chat: {e}", type="negative")
            return
        state.chats = [c for c in state.chats if c["id"] != chat["id"]]
        if state.active_chat_id == chat["id"]:
            state.active_chat_id = None
            state.active_title = ""
            state.messages = []
            refresh_messages()
        refresh_chat_list()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        try:
            chat = await upload_file(e.file.name, await e.file.read(), e.file.content_type)
        except (RuntimeError, httpx.HTTPError) as err:
            ui.notify(str(err), type="negative")
            return
        state.chats.insert(0, chat)
        state.active_chat_id = chat["id"]
        state.active_title = chat["title"]
        state.messages = []
        refresh_chat_list()
        refresh_messages()
        ui.notify(f"Uploaded {chat['title']}", type="positive")

    async def send_message() -> None:
        text = input_field.value.strip()
        if not text or state.is_streaming or state.active_chat_id is None:
            return

        input_field.value = ""
        state.is_streaming = True
        send_btn.disable()

        state.add_message("user", text)
        reply = state.add_message("assistant", "")
        reply_html = refresh_messages()

        def on_chunk(chunk: str) -> None:
            reply["content"] += chunk
            if reply_html is not None:
                reply_html.set_content(markdown_to_html(reply["content"]))

        try:
            await stream_chat_response(state.active_chat_id, text, on_chunk)
        except httpx.HTTPStatusError as e:
            reply["content"] += f"Sorry, an error occurred: HTTP {e.response.status_code}"
            ui.notify(f"HTTP {e.response.status_code}", type="negative")
        except httpx.RequestError as e:
            # Truncated stream: keep what arrived, flag it as incomplete
            reply["content"] += STREAM_ERROR_FALLBACK
            ui.notify(f"Connection failed: {e}", type="negative")
        finally:
            state.is_streaming = False
            send_btn.enable()
            refresh_messages()

    # === UI Layout ===
    with ui.row().classes("w-full h-screen no-wrap gap-0"):
        with ui.column().classes("sidebar w-72 h-full p-3 gap-3"):
            ui.label("PDF Chat").classes("text-lg font-semibold text-white")
            ui.upload(
                label="Upload PDF",
                on_upload=handle_upload,
                auto_upload=True,
                max_files=1,
            ).props("accept=.pdf,.txt,.md flat dark").classes("w-full")
            with ui.scroll_area().classes("flex-grow w-full"):
                chat_list = ui.column().classes("w-full gap-1")

        with ui.column().classes("flex-grow h-full gap-0 bg-white"):
            with ui.row().classes("w-full px-5 py-4 border-b items-center"):
                ui.icon("description").classes("text-2xl text-indigo-600")
                title_label = ui.label().classes("text-lg font-semibold")

            with ui.scroll_area().classes("flex-grow w-full bg-gray-50"):
                messages_container = ui.column().classes("w-full p-5 gap-4")

            with ui.row().classes("w-full p-4 gap-3 items-end border-t"):
                input_field = (
                    ui.textarea(placeholder="Ask a question about the document...")
                    .props("autogrow outlined dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    refresh_messages()
    await load_chats()


def main() -> None:
    ui.run(title="PDF Chat", port=8080, reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()
