# app.py
from __future__ import annotations
from typing import Optional
from textual.app import App
from api.client import ApiClient
from config import Settings, load_settings
from flows import FLOWS, Flow
from i18n import LanguageContext
from verification import RemoteCodeVerifier
from wizard import WizardController
from logger import log


class KisanManchWizard(App):
    """Rashtriya Kisan Manch membership and youth programme wizard."""

    TITLE = "Rashtriya Kisan Manch"

    CSS = """
    Screen {
        background: $surface;
    }
    .title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    .hidden {
        display: none;
    }
    .field_err {
        color: $error;
        margin-bottom: 1;
    }
    #content {
        margin: 1 2;
    }
    #form {
        margin: 1 2;
    }
    #nav_buttons {
        dock: bottom;
        height: 3;
        align: center middle;
        margin: 1 2;
    }
    #footer_buttons {
        dock: bottom;
        height: 3;
        align: center middle;
    }
    Button {
        margin: 0 1;
    }
    #err_msg {
        margin-top: 1;
        color: $error;
    }
    DataTable {
        height: 10;
    }
    TextArea {
        height: 6;
        margin-bottom: 1;
    }
    Input {
        margin-bottom: 1;
    }
    #home_menu {
        height: auto;
        margin-top: 1;
    }
    #home_menu Button {
        width: 40;
        margin-bottom: 1;
    }
    #attach_row {
        height: auto;
    }
    #attach_row Input {
        width: 1fr;
    }
    #counters, #testimonial, #receipt_status {
        margin-top: 1;
    }
    """

    BINDINGS = [
        ("ctrl+l", "toggle_language", "हिंदी / English"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, settings: Optional[Settings] = None, api=None) -> None:
        super().__init__()
        self.settings = settings or load_settings()
        self.lang = LanguageContext(self.settings.language, self.settings.prefs_path)
        self.lang.subscribe(self._on_language_changed)
        self.api = api or ApiClient(
            self.settings.api_base_url,
            fallback_url=self.settings.fallback_api_url,
            timeout=self.settings.request_timeout,
        )
        self.verifier: Optional[RemoteCodeVerifier] = None
        self.flow: Optional[Flow] = None
        self.wizard: Optional[WizardController] = None
        log.info("KisanManchWizard started (lang=%s)", self.lang.language)

    async def on_mount(self) -> None:
        from screens.s01_home import HomeScreen
        await self.push_screen(HomeScreen())

    async def on_unmount(self) -> None:
        if self.wizard is not None:
            self.wizard.teardown()
        close = getattr(self.api, "aclose", None)
        if close is not None:
            await close()

    # -- Flow control -------------------------------------------------------------

    def start_flow(self, key: str) -> None:
        flow = FLOWS[key]
        self.flow = flow
        self.verifier = RemoteCodeVerifier(self.api)
        self.wizard = WizardController(
            flow.build_steps(self.verifier, self.lang.t),
            self.api.submit_application,
            name=key,
            initial_data=flow.initial_data(),
            receipt_generator=self.api.generate_receipt,
            receipts_dir=self.settings.receipts_dir,
        )
        log.info("Flow %s started with %d steps", key, len(self.wizard.state.steps))
        self.show_current_step()

    def show_current_step(self) -> None:
        """Push the screen for the controller's current step."""
        from screens.s02_identity import IdentityScreen
        from screens.s03_verification import VerificationScreen
        from screens.s04_background import BackgroundScreen
        from screens.s05_upload import UploadScreen
        screens = {
            "identity": IdentityScreen,
            "verification": VerificationScreen,
            "background": BackgroundScreen,
            "upload": UploadScreen,
        }
        self.push_screen(screens[self.wizard.current_step.id]())

    def show_completion(self) -> None:
        from screens.s06_complete import CompleteScreen
        self.push_screen(CompleteScreen())

    def return_home(self) -> None:
        """Drop the finished or abandoned flow and unwind to the home screen."""
        from screens.s01_home import HomeScreen
        if self.wizard is not None:
            self.wizard.teardown()
        self.wizard = None
        self.flow = None
        self.verifier = None
        while len(self.screen_stack) > 1 and not isinstance(self.screen, HomeScreen):
            self.pop_screen()

    # -- Language -----------------------------------------------------------------

    def action_toggle_language(self) -> None:
        self.lang.toggle()

    def _on_language_changed(self, language: str) -> None:
        for screen in self.screen_stack:
            apply = getattr(screen, "apply_language", None)
            if apply is not None and screen.is_mounted:
                apply()
