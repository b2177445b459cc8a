"""
LingoSpark - Tkinter (card-based) desktop client

Flow:
1. Language card: pick your native language, then the one you are learning.
2. Search card: type a word, phrase or sentence.
3. Result card: definition, examples, usage notes, illustration, speech,
   and a chat about the word. Save it to your notebook.
4. Notebook card: saved words, plus a story woven from them.
5. Flashcards card: flip through saved words.

Setup (from repo root):

    python -m venv .venv
    source .venv/bin/activate   # or .venv\\Scripts\\activate on Windows
    pip install -e .

Ensure .env contains:
    OPENAI_API_KEY=sk-...

Then run:
    python main.py
"""

import io
import tkinter as tk
from tkinter import ttk, messagebox
from typing import Dict, List, Optional

from PIL import Image, ImageTk

from lingospark.api import decode_data_url, is_api_available
from lingospark.app_state import AppState
from lingospark.languages import SUPPORTED_LANGUAGES
from lingospark.logger import logger
from lingospark.models import AppView, ChatRole, ChatStatus, WordResult
from lingospark.story import MIN_STORY_WORDS, parse_story_markup
from lingospark.tasks import ThreadDispatcher

BG = "#1e1e1e"
PANEL = "#2d2d2d"
TEXT = "#e0e0e0"
MUTED = "#9a9a9a"
ACCENT = "#7bb3ff"
WARN = "#ff6b6b"


# ---------------------------------------------------------------------------
# Shared widgets
# ---------------------------------------------------------------------------

class ScrollableFrame(ttk.Frame):
    """
    A frame with vertical scrolling for content taller than the window.

    Add widgets to ``scrollable.content`` instead of the frame itself.
    """

    def __init__(self, parent, **kwargs) -> None:
        super().__init__(parent, **kwargs)

        self.canvas = tk.Canvas(self, highlightthickness=0, background=BG)
        self.scrollbar = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self.content = ttk.Frame(self.canvas)
        self.content_window = self.canvas.create_window((0, 0), window=self.content, anchor="n")

        self.canvas.configure(yscrollcommand=self.scrollbar.set)
        self.canvas.pack(side="left", fill="both", expand=True)
        self.scrollbar.pack(side="right", fill="y")

        self.content.bind("<Configure>", self._on_content_configure)
        self.canvas.bind("<Configure>", self._on_canvas_configure)
        self.bind("<Enter>", lambda e: self._bind_wheel())
        self.bind("<Leave>", lambda e: self._unbind_wheel())

    def _on_content_configure(self, event: tk.Event) -> None:
        self.canvas.configure(scrollregion=self.canvas.bbox("all"))

    def _on_canvas_configure(self, event: tk.Event) -> None:
        # Keep content centered horizontally
        self.canvas.coords(self.content_window, event.width // 2, 0)

    def _bind_wheel(self) -> None:
        self.canvas.bind_all("<MouseWheel>", self._on_mousewheel)
        self.canvas.bind_all("<Button-4>", lambda e: self.canvas.yview_scroll(-1, "units"))
        self.canvas.bind_all("<Button-5>", lambda e: self.canvas.yview_scroll(1, "units"))

    def _unbind_wheel(self) -> None:
        self.canvas.unbind_all("<MouseWheel>")
        self.canvas.unbind_all("<Button-4>")
        self.canvas.unbind_all("<Button-5>")

    def _on_mousewheel(self, event: tk.Event) -> None:
        if event.delta:
            step = -1 if event.delta > 0 else 1
            self.canvas.yview_scroll(step, "units")

    def scroll_to_bottom(self) -> None:
        self.after_idle(lambda: self.canvas.yview_moveto(1.0))


class LoadingSpinner(ttk.Frame):
    """A simple animated loading spinner widget for Tkinter."""

    SPINNER_CHARS = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

    def __init__(self, parent, text: str = "Thinking...") -> None:
        super().__init__(parent)
        self.text = text
        self.spinner_index = 0
        self.is_running = False
        self._after_id = None

        self.label = ttk.Label(self, text=f"{self.SPINNER_CHARS[0]} {text}",
                               font=("Helvetica", 14), foreground=ACCENT)
        self.label.pack(pady=20)

    def start(self) -> None:
        if self.is_running:
            return
        self.is_running = True
        self._animate()

    def stop(self) -> None:
        self.is_running = False
        if self._after_id:
            self.after_cancel(self._after_id)
            self._after_id = None

    def _animate(self) -> None:
        if not self.is_running:
            return
        char = self.SPINNER_CHARS[self.spinner_index]
        self.label.configure(text=f"{char} {self.text}")
        self.spinner_index = (self.spinner_index + 1) % len(self.SPINNER_CHARS)
        self._after_id = self.after(100, self._animate)


def load_photo(image_url: Optional[str], max_size: int = 320) -> Optional[ImageTk.PhotoImage]:
    """Decode a data URL into a PhotoImage, or None if it cannot be shown."""
    if not image_url:
        return None
    try:
        image = Image.open(io.BytesIO(decode_data_url(image_url)))
        image.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)
        return ImageTk.PhotoImage(image)
    except Exception as e:
        logger.img_error(f"Could not display image: {e}")
        return None


def clear_children(widget: tk.Widget) -> None:
    for child in widget.winfo_children():
        child.destroy()


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

class LingoSparkApp(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        logger.ui("Initializing LingoSparkApp window...")

        self.title("LingoSpark")
        window_width, window_height = 520, 820
        center_x = int(self.winfo_screenwidth() / 2 - window_width / 2)
        center_y = int(self.winfo_screenheight() / 2 - window_height / 2)
        self.geometry(f"{window_width}x{window_height}+{center_x}+{center_y}")
        self.minsize(400, 500)

        self.configure(bg=BG)
        style = ttk.Style()
        style.theme_use("clam")
        style.configure("TFrame", background=BG)
        style.configure("TLabel", background=BG, foreground=TEXT, font=("Helvetica", 14))
        style.configure("TButton", background=PANEL, foreground=TEXT, font=("Helvetica", 13))
        style.map("TButton", background=[("active", "#3d3d3d"), ("disabled", "#252525")])
        style.configure("Nav.TButton", font=("Helvetica", 12))
        style.configure("Active.TButton", background="#4a6fa5", foreground="#ffffff")
        style.configure("Primary.TButton", font=("Helvetica", 14, "bold"), padding=10)

        self.app_state = AppState(
            dispatcher=ThreadDispatcher(self),
            notify_error=lambda message: messagebox.showerror("LingoSpark", message),
        )

        self._build_header()

        self.container = ttk.Frame(self)
        self.container.pack(fill="both", expand=True)
        self.container.rowconfigure(0, weight=1)
        self.container.columnconfigure(0, weight=1)

        self.cards: Dict[AppView, ttk.Frame] = {}
        for view, CardClass in (
            (AppView.LANGUAGE_SELECT, LanguageSelectCard),
            (AppView.SEARCH, SearchCard),
            (AppView.RESULT, ResultCard),
            (AppView.NOTEBOOK, NotebookCard),
            (AppView.FLASHCARDS, FlashcardCard),
        ):
            card = CardClass(parent=self.container, controller=self)
            card.grid(row=0, column=0, sticky="nsew")
            self.cards[view] = card

        self._build_nav()

        self.app_state.subscribe(self.refresh)
        self._shown_view: Optional[AppView] = None
        self.refresh()
        logger.ui("Application initialized successfully")

    def _build_header(self) -> None:
        self.header = ttk.Frame(self)
        title = ttk.Label(self.header, text="LingoSpark", font=("Helvetica", 22, "bold"),
                          foreground="#ff8a65", cursor="hand2")
        title.pack(side="left", padx=16, pady=10)
        title.bind("<Button-1>", lambda e: self.app_state.navigate(AppView.SEARCH))
        self.flags_label = ttk.Label(self.header, text="", font=("Helvetica", 20))
        self.flags_label.pack(side="right", padx=16)

    def _build_nav(self) -> None:
        self.nav = ttk.Frame(self)
        self.nav_buttons: Dict[AppView, ttk.Button] = {}
        for view, label in (
            (AppView.SEARCH, "🔍 Search"),
            (AppView.RESULT, "📖 Result"),
            (AppView.NOTEBOOK, "📓 Notebook"),
            (AppView.FLASHCARDS, "🃏 Cards"),
        ):
            button = ttk.Button(self.nav, text=label, style="Nav.TButton",
                                command=lambda v=view: self.app_state.navigate(v))
            button.pack(side="left", expand=True, fill="x", padx=4, pady=8)
            self.nav_buttons[view] = button

    def refresh(self) -> None:
        """Re-render from AppState; called after every state change."""
        state = self.app_state
        onboarding = state.view is AppView.LANGUAGE_SELECT

        if onboarding:
            self.header.pack_forget()
            self.nav.pack_forget()
        else:
            if not self.header.winfo_manager():
                self.header.pack(side="top", fill="x", before=self.container)
                self.nav.pack(side="bottom", fill="x", before=self.container)
            self.flags_label.configure(text=f"{state.native_lang.flag} → {state.target_lang.flag}")
            for view, button in self.nav_buttons.items():
                button.configure(style="Active.TButton" if view is state.view else "Nav.TButton")

        card = self.cards[state.view]
        if self._shown_view is not state.view:
            card.tkraise()
            self._shown_view = state.view
        card.refresh()


# ---------------------------------------------------------------------------
# Language selection
# ---------------------------------------------------------------------------

class LanguageSelectCard(ttk.Frame):
    def __init__(self, parent, controller: LingoSparkApp) -> None:
        super().__init__(parent)
        self.controller = controller
        self.columnconfigure(0, weight=1)

        ttk.Label(self, text="LingoSpark AI", font=("Helvetica", 30, "bold"),
                  foreground="#ffffff").grid(row=0, column=0, pady=(50, 10))
        self.prompt_label = ttk.Label(self, text="", font=("Helvetica", 15), foreground=MUTED)
        self.prompt_label.grid(row=1, column=0, pady=(0, 20))

        grid = ttk.Frame(self)
        grid.grid(row=2, column=0, padx=30)
        self.lang_buttons: Dict[str, ttk.Button] = {}
        for i, lang in enumerate(SUPPORTED_LANGUAGES):
            button = ttk.Button(grid, text=f"{lang.flag}  {lang.name}", width=16,
                                command=lambda l=lang: controller.app_state.select_language(l))
            button.grid(row=i // 2, column=i % 2, padx=8, pady=6, sticky="ew")
            self.lang_buttons[lang.code] = button

        self.back_button = ttk.Button(self, text="Back to Native Language",
                                      command=controller.app_state.back_to_native_step)
        self.back_button.grid(row=3, column=0, pady=20)

        self.api_warning = ttk.Label(
            self,
            text="⚠ OpenAI API key not found!\nAdd OPENAI_API_KEY=sk-... to a .env file.",
            foreground=WARN, justify="center", font=("Helvetica", 12),
        )
        self.api_warning.grid(row=4, column=0, pady=10)
        if is_api_available():
            self.api_warning.grid_remove()

    def refresh(self) -> None:
        state = self.controller.app_state
        step_two = state.picker_step == 2
        self.prompt_label.configure(
            text="Which language do you want to learn?" if step_two else "What's your native language?"
        )
        native_code = state.native_lang.code if state.native_lang else None
        for code, button in self.lang_buttons.items():
            disabled = step_two and code == native_code
            button.configure(state="disabled" if disabled else "normal")
        if step_two:
            self.back_button.grid()
        else:
            self.back_button.grid_remove()


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class SearchCard(ttk.Frame):
    def __init__(self, parent, controller: LingoSparkApp) -> None:
        super().__init__(parent)
        self.controller = controller
        self.columnconfigure(0, weight=1)

        ttk.Label(self, text="What do you want to say?", font=("Helvetica", 24, "bold"),
                  foreground="#ffffff").grid(row=0, column=0, pady=(80, 8))
        ttk.Label(self, text="Enter a word, phrase, or sentence.",
                  foreground=MUTED).grid(row=1, column=0, pady=(0, 20))

        self.text = tk.Text(self, height=5, width=34, font=("Helvetica", 18, "bold"), wrap="word",
                            bg=PANEL, fg="#ffffff", insertbackground="#ffffff", relief="flat",
                            padx=12, pady=12)
        self.text.grid(row=2, column=0, padx=30)
        self.text.bind("<Return>", self._on_return)
        self.text.bind("<KeyRelease>", self._on_key_release)

        self.search_button = ttk.Button(self, text="🔍 Search", style="Primary.TButton",
                                        command=self._on_search_clicked)
        self.search_button.grid(row=3, column=0, pady=20)

    def _current_text(self) -> str:
        return self.text.get("1.0", "end-1c")

    def _on_key_release(self, event: tk.Event) -> None:
        self.controller.app_state.set_input_text(self._current_text())
        self._update_button()

    def _on_return(self, event: tk.Event) -> Optional[str]:
        if event.state & 0x1:  # Shift+Enter inserts a newline
            return None
        self._on_search_clicked()
        return "break"

    def _on_search_clicked(self) -> None:
        state = self.controller.app_state
        state.set_input_text(self._current_text())
        state.submit_search()

    def _update_button(self) -> None:
        enabled = bool(self._current_text().strip())
        self.search_button.configure(state="normal" if enabled else "disabled")

    def refresh(self) -> None:
        state = self.controller.app_state
        if self._current_text() != state.input_text:
            self.text.delete("1.0", "end")
            self.text.insert("1.0", state.input_text)
        if state.target_lang is not None:
            self.controller.title(f"LingoSpark - learning {state.target_lang.name}")
        self._update_button()
        self.text.focus_set()


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class ResultCard(ttk.Frame):
    def __init__(self, parent, controller: LingoSparkApp) -> None:
        super().__init__(parent)
        self.controller = controller
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self.scrollable = ScrollableFrame(self)
        self.scrollable.grid(row=0, column=0, sticky="nsew")
        self.content = self.scrollable.content

        self.loading_spinner = LoadingSpinner(self, text="Asking the AI wizard...")
        self.empty_frame = ttk.Frame(self)
        ttk.Button(self.empty_frame, text="Go Back",
                   command=lambda: controller.app_state.navigate(AppView.SEARCH)).pack(pady=80)

        self.body = ttk.Frame(self.content)
        self.body.pack(fill="x")
        self.chat_frame = ttk.Frame(self.content)
        self.chat_frame.pack(fill="x", pady=(20, 10))
        self._build_chat_controls()

        self._rendered_id: Optional[str] = None
        self._photo: Optional[ImageTk.PhotoImage] = None
        self.save_button: Optional[ttk.Button] = None
        self.audio_buttons: Dict[str, ttk.Button] = {}

    def _build_chat_controls(self) -> None:
        ttk.Label(self.chat_frame, text="💬 Ask me anything!", font=("Helvetica", 16, "bold")
                  ).pack(anchor="w", padx=20)
        self.messages_frame = ttk.Frame(self.chat_frame)
        self.messages_frame.pack(fill="x", padx=20, pady=6)

        entry_row = ttk.Frame(self.chat_frame)
        entry_row.pack(fill="x", padx=20)
        self.chat_var = tk.StringVar()
        self.chat_entry = ttk.Entry(entry_row, textvariable=self.chat_var, font=("Helvetica", 13))
        self.chat_entry.pack(side="left", fill="x", expand=True)
        self.chat_entry.bind("<Return>", lambda e: self._on_send())
        self.chat_var.trace_add("write", lambda *args: self._update_send_button())
        self.send_button = ttk.Button(entry_row, text="➤", width=3, command=self._on_send)
        self.send_button.pack(side="left", padx=(6, 0))

    def _on_send(self) -> None:
        if self.controller.app_state.send_chat(self.chat_var.get()):
            self.chat_var.set("")

    def _update_send_button(self) -> None:
        conversation = self.controller.app_state.conversation
        enabled = bool(self.chat_var.get().strip()) and not conversation.is_sending
        self.send_button.configure(state="normal" if enabled else "disabled")

    def refresh(self) -> None:
        state = self.controller.app_state

        if state.is_loading:
            self.scrollable.grid_remove()
            self.empty_frame.grid_remove()
            self.loading_spinner.grid(row=0, column=0)
            self.loading_spinner.start()
            return
        self.loading_spinner.stop()
        self.loading_spinner.grid_remove()

        result = state.current_result
        if result is None:
            self.scrollable.grid_remove()
            self.empty_frame.grid(row=0, column=0)
            self._rendered_id = None
            return
        self.empty_frame.grid_remove()
        self.scrollable.grid()

        if result.id != self._rendered_id:
            self._render_body(result)
            self._rendered_id = result.id
            self.chat_var.set("")

        self.save_button.configure(text="♥ Saved" if state.is_saved(result.id) else "♡ Save")
        for key, button in self.audio_buttons.items():
            label = "⏳" if state.audio_key == key else "🔊"
            button.configure(text=label, state="disabled" if state.audio_busy else "normal")
        self._render_messages()
        self._update_send_button()

    def _render_body(self, result: WordResult) -> None:
        clear_children(self.body)
        self.audio_buttons = {}
        state = self.controller.app_state

        self._photo = load_photo(result.image_url)
        if self._photo is not None:
            ttk.Label(self.body, image=self._photo).pack(pady=(16, 8))
        else:
            ttk.Label(self.body, text="🖼", font=("Helvetica", 64), foreground=MUTED).pack(pady=(16, 8))

        title_row = ttk.Frame(self.body)
        title_row.pack(fill="x", padx=20)
        ttk.Label(title_row, text=result.original_text, font=("Helvetica", 26, "bold"),
                  foreground="#ffffff", wraplength=360).pack(side="left")
        self.save_button = ttk.Button(title_row, text="♡ Save", command=lambda: state.save(result))
        self.save_button.pack(side="right")
        main_audio = ttk.Button(title_row, text="🔊", width=3,
                                command=lambda: state.play_audio(result.original_text, "main"))
        main_audio.pack(side="right", padx=6)
        self.audio_buttons["main"] = main_audio

        ttk.Label(self.body, text=result.target_lang, foreground=ACCENT,
                  font=("Helvetica", 12)).pack(anchor="w", padx=20)
        ttk.Label(self.body, text=result.definition, wraplength=440, justify="left"
                  ).pack(anchor="w", padx=20, pady=(10, 6))

        notes = ttk.Frame(self.body)
        notes.pack(fill="x", padx=20, pady=8)
        ttk.Label(notes, text="💡 Usage notes", font=("Helvetica", 14, "bold"),
                  foreground="#ffb347").pack(anchor="w")
        ttk.Label(notes, text=result.usage_notes, wraplength=440, justify="left",
                  font=("Helvetica", 13)).pack(anchor="w")

        ttk.Label(self.body, text="Examples", font=("Helvetica", 16, "bold")).pack(anchor="w", padx=20, pady=(12, 4))
        for idx, example in enumerate(result.examples):
            row = ttk.Frame(self.body)
            row.pack(fill="x", padx=20, pady=4)
            texts = ttk.Frame(row)
            texts.pack(side="left", fill="x", expand=True)
            ttk.Label(texts, text=example.target, wraplength=380, justify="left",
                      font=("Helvetica", 14, "bold")).pack(anchor="w")
            ttk.Label(texts, text=example.native, wraplength=380, justify="left",
                      foreground=MUTED, font=("Helvetica", 12)).pack(anchor="w")
            key = f"ex-{idx}"
            button = ttk.Button(row, text="🔊", width=3,
                                command=lambda t=example.target, k=key: state.play_audio(t, k))
            button.pack(side="right")
            self.audio_buttons[key] = button

    def _render_messages(self) -> None:
        clear_children(self.messages_frame)
        conversation = self.controller.app_state.conversation

        if not conversation.messages:
            ttk.Label(self.messages_frame,
                      text="Curious about this word? Ask for more examples, synonyms, or grammar tips!",
                      foreground=MUTED, wraplength=440, font=("Helvetica", 12)).pack(anchor="w")

        for msg in conversation.messages:
            is_user = msg.role is ChatRole.USER
            text = msg.text
            if msg.status is ChatStatus.FAILED:
                text += "\n⚠ Not sent"
            ttk.Label(
                self.messages_frame,
                text=text,
                wraplength=340,
                justify="right" if is_user else "left",
                foreground="#ffffff" if is_user else TEXT,
                font=("Helvetica", 13),
            ).pack(anchor="e" if is_user else "w", pady=3)

        if conversation.is_sending:
            ttk.Label(self.messages_frame, text="…", foreground=MUTED).pack(anchor="w")
        if conversation.messages:
            self.scrollable.scroll_to_bottom()


# ---------------------------------------------------------------------------
# Notebook
# ---------------------------------------------------------------------------

class NotebookCard(ttk.Frame):
    def __init__(self, parent, controller: LingoSparkApp) -> None:
        super().__init__(parent)
        self.controller = controller
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self.scrollable = ScrollableFrame(self)
        self.scrollable.grid(row=0, column=0, sticky="nsew")
        self.content = self.scrollable.content

        ttk.Label(self.content, text="My Notebook", font=("Helvetica", 26, "bold"),
                  foreground="#ffffff").pack(pady=(20, 10))

        self.story_frame = ttk.Frame(self.content)
        self.story_frame.pack(fill="x", padx=20, pady=10)
        ttk.Label(self.story_frame, text="✨ Story Mode", font=("Helvetica", 16, "bold")
                  ).pack(anchor="w")
        self.story_button = ttk.Button(self.story_frame, text="Create Story",
                                       command=controller.app_state.request_story)
        self.story_button.pack(anchor="w", pady=6)
        self.story_spinner = LoadingSpinner(self.story_frame, text="Weaving your words into a tale...")
        self.story_hint = ttk.Label(self.story_frame, foreground=MUTED, font=("Helvetica", 12),
                                    text=f"Save at least {MIN_STORY_WORDS} words to create a story!")
        self.story_text = tk.Text(self.story_frame, height=12, width=46, wrap="word", bg=PANEL, fg=TEXT,
                                  relief="flat", font=("Helvetica", 13), padx=10, pady=10)
        self.story_text.tag_configure("bold", font=("Helvetica", 13, "bold"), foreground="#ffb347")

        self.empty_label = ttk.Label(self.content, text="Your notebook is empty.\nSave words from your searches!",
                                     foreground=MUTED, justify="center")
        self.list_frame = ttk.Frame(self.content)
        self.list_frame.pack(fill="x", padx=20, pady=10)

    def refresh(self) -> None:
        state = self.controller.app_state
        words = state.notebook.words
        story = state.story

        if not words:
            self.story_frame.pack_forget()
            self.empty_label.pack(pady=40)
        else:
            self.empty_label.pack_forget()
            if not self.story_frame.winfo_manager():
                self.story_frame.pack(fill="x", padx=20, pady=10, before=self.list_frame)

        enough = len(words) >= MIN_STORY_WORDS
        self.story_button.configure(
            text="Weaving..." if story.is_loading else "Create Story",
            state="normal" if enough and not story.is_loading else "disabled",
        )
        if story.is_loading:
            self.story_spinner.pack(anchor="w")
            self.story_spinner.start()
        else:
            self.story_spinner.stop()
            self.story_spinner.pack_forget()

        if not story.is_loading and story.text:
            self._render_story(story.text)
            self.story_text.pack(fill="x", pady=6)
        else:
            self.story_text.pack_forget()

        if not story.is_loading and not story.text and not enough:
            self.story_hint.pack(anchor="w")
        else:
            self.story_hint.pack_forget()

        self._render_words(words)

    def _render_story(self, text: str) -> None:
        self.story_text.configure(state="normal")
        self.story_text.delete("1.0", "end")
        for segments in parse_story_markup(text):
            for chunk, bold in segments:
                self.story_text.insert("end", chunk, ("bold",) if bold else ())
            self.story_text.insert("end", "\n")
        self.story_text.configure(state="disabled")

    def _render_words(self, words: List[WordResult]) -> None:
        clear_children(self.list_frame)
        state = self.controller.app_state
        for word in words:
            row = ttk.Frame(self.list_frame)
            row.pack(fill="x", pady=4)
            label = ttk.Label(row, text=f"{word.original_text}\n{word.definition[:60]}",
                              cursor="hand2", wraplength=360, justify="left")
            label.pack(side="left", fill="x", expand=True)
            label.bind("<Button-1>", lambda e, w=word: state.open_word(w))
            ttk.Button(row, text="🗑", width=3,
                       command=lambda i=word.id: state.delete(i)).pack(side="right")


# ---------------------------------------------------------------------------
# Flashcards
# ---------------------------------------------------------------------------

class FlashcardCard(ttk.Frame):
    def __init__(self, parent, controller: LingoSparkApp) -> None:
        super().__init__(parent)
        self.controller = controller
        self.columnconfigure(0, weight=1)

        self.counter_label = ttk.Label(self, text="", foreground=MUTED)
        self.counter_label.grid(row=0, column=0, pady=(20, 10))

        self.face = tk.Frame(self, bg=PANEL, width=380, height=420, cursor="hand2")
        self.face.grid(row=1, column=0, padx=30)
        self.face.pack_propagate(False)
        self.face.bind("<Button-1>", lambda e: controller.app_state.flip_card())

        controls = ttk.Frame(self)
        controls.grid(row=2, column=0, pady=20)
        self.prev_button = ttk.Button(controls, text="⬅️", command=controller.app_state.prev_card)
        self.prev_button.pack(side="left", padx=20)
        self.next_button = ttk.Button(controls, text="➡️", command=controller.app_state.next_card)
        self.next_button.pack(side="left", padx=20)

        self._photo: Optional[ImageTk.PhotoImage] = None

    def _face_label(self, text: str, **kwargs) -> tk.Label:
        options = {"bg": PANEL, "fg": TEXT, "wraplength": 340, "justify": "center"}
        options.update(kwargs)
        label = tk.Label(self.face, text=text, **options)
        label.bind("<Button-1>", lambda e: self.controller.app_state.flip_card())
        return label

    def refresh(self) -> None:
        deck = self.controller.app_state.flashcards
        clear_children(self.face)
        word = deck.current()

        if word is None:
            self.counter_label.configure(text="")
            self._face_label("No cards yet!\nSave words to your notebook to start reviewing.",
                             fg=MUTED, font=("Helvetica", 14)).pack(expand=True)
            self.prev_button.configure(state="disabled")
            self.next_button.configure(state="disabled")
            return

        self.counter_label.configure(text=f"{deck.index + 1} / {deck.size}")
        self.prev_button.configure(state="normal")
        self.next_button.configure(state="normal")

        if not deck.flipped:
            self._photo = load_photo(word.image_url, max_size=240)
            if self._photo is not None:
                self._face_label("", image=self._photo).pack(pady=(30, 10))
            self._face_label(word.original_text, fg="#ffffff",
                             font=("Helvetica", 26, "bold")).pack(expand=True)
            self._face_label("Tap to flip", fg=MUTED, font=("Helvetica", 11)).pack(pady=10)
        else:
            self._face_label(word.definition, font=("Helvetica", 15)).pack(pady=(40, 16), padx=16)
            for example in word.examples[:1]:
                self._face_label(example.target, fg="#ffb347",
                                 font=("Helvetica", 14, "bold")).pack(padx=16)
                self._face_label(example.native, fg=MUTED, font=("Helvetica", 12)).pack(padx=16)


def main() -> None:
    logger.banner("LingoSpark - Starting Application")
    app = LingoSparkApp()
    app.mainloop()


if __name__ == "__main__":
    main()
