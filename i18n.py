"""
English/Hindi UI strings and the process-wide language selection.

The App owns the single LanguageContext instance; screens read it through
``self.app.lang`` and only ``set_language``/``toggle`` change it.
"""
from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, List, Optional
import yaml
from logger import log

SUPPORTED_LANGUAGES = ("en", "hi")

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        # Navigation / actions
        "app_title": "Rashtriya Kisan Manch",
        "become_member": "Become a Member",
        "youth_program": "Kisan Youth Leadership Program",
        "about_us": "About Our Movement",
        "quit": "Quit",
        "next": "Next →",
        "back": "← Back",
        "skip": "Skip →",
        "submit": "Submit",
        "submitting": "Submitting…",
        "return_home": "Return to Home",
        "step_of": "Step {current} of {total}",
        "language_toggle": "हिंदी / English (Ctrl+L)",
        "join_community": "Join our agricultural community and be part of the change",
        # Identity
        "personal_information": "Personal Information",
        "full_name": "Full Name",
        "village": "Village",
        "city": "City",
        "mobile_number": "Mobile Number",
        "problem_details": "Problem Details",
        "accept_terms": "I accept the terms and conditions",
        # Verification
        "verify_mobile": "Verify Mobile Number",
        "verification_code": "Verification Code",
        "sending_code": "Sending a verification code…",
        "code_sent": "We sent a 6-digit code to {phone}.",
        "code_send_failed": "Could not send the code: {error}",
        "resend_code": "Resend Code",
        # Background
        "background_info": "Background Information",
        "age": "Age",
        "education": "Education",
        "experience": "Agricultural Experience",
        "motivation": "Motivation",
        # Upload
        "document_upload": "Document Upload",
        "upload_desc": "Supported formats: JPG, PNG, PDF (max 5MB). Skip if you have no document.",
        "file_path": "File path",
        "attach": "Attach",
        "remove": "Remove",
        "document_type": "Document Type",
        "no_attachments": "No document attached.",
        # Completion
        "registration_successful": "Registration Successful!",
        "application_submitted": "Application Submitted!",
        "reference_id": "Reference ID",
        "status": "Status",
        "status_pending": "Pending",
        "status_accepted": "Accepted",
        "status_rejected": "Rejected",
        "verification_message": "Our team will verify your details and contact you within 24-48 hours.",
        "receipt_idle": "Receipt not requested yet.",
        "receipt_pending": "Downloading your application receipt…",
        "receipt_succeeded": "Receipt saved to {path}",
        "receipt_failed": "Receipt download failed: {error}",
        "retry_receipt": "Retry Receipt",
        # About
        "our_impact": "Our Impact",
        "farmers": "Farmers Reached",
        "villages": "Villages",
        "programs": "Programs",
        "states": "States",
        "testimonials": "Voices from the Field",
        "milestones": "Key Milestones",
        "search": "Search milestones…",
        "community_stats": "{stories} success stories · {satisfaction}% satisfaction · {income}% average income increase",
        # Errors
        "err_required": "{label} is required",
        "err_min_length": "{label} must be at least {min} characters",
        "err_max_length": "{label} must be at most {max} characters",
        "err_range": "{label} must be between {min} and {max}",
        "err_number": "{label} must be a number",
        "err_integer": "{label} must be a whole number",
        "err_pattern": "{label} is not valid",
        "err_phone": "Please enter a valid 10-digit Indian mobile number",
        "err_terms": "You must accept the terms and conditions",
        "err_code_format": "Enter the 6-digit code",
        "err_code_invalid": "Invalid verification code",
        "err_not_registered": "This mobile number is not registered with the server ({message}).",
        "err_document_type": "Please select a document type.",
        "err_unsupported_type": "Invalid file format. Only JPG, PNG, and PDF files are allowed.",
        "err_too_large": "File size exceeds the 5MB limit.",
        "err_upload": "This file cannot be attached.",
        "err_file_missing": "File not found: {path}",
        "err_submission": "Submission failed: {message}",
        "err_network": "Could not reach the server ({message}). Check your connection and try again.",
    },
    "hi": {
        "app_title": "राष्ट्रीय किसान मंच",
        "become_member": "सदस्य बनें",
        "youth_program": "किसान युवा नेतृत्व कार्यक्रम",
        "about_us": "हमारे आंदोलन के बारे में",
        "quit": "बाहर निकलें",
        "next": "आगे →",
        "back": "← पीछे",
        "skip": "छोड़ें →",
        "submit": "जमा करें",
        "submitting": "जमा किया जा रहा है…",
        "return_home": "मुख्य पृष्ठ पर लौटें",
        "step_of": "चरण {current} / {total}",
        "language_toggle": "English / हिंदी (Ctrl+L)",
        "join_community": "हमारे कृषि समुदाय से जुड़ें और बदलाव का हिस्सा बनें",
        "personal_information": "व्यक्तिगत जानकारी",
        "full_name": "पूरा नाम",
        "village": "गाँव",
        "city": "शहर",
        "mobile_number": "मोबाइल नंबर",
        "problem_details": "समस्या का विवरण",
        "accept_terms": "मैं नियम और शर्तें स्वीकार करता/करती हूँ",
        "verify_mobile": "मोबाइल नंबर सत्यापित करें",
        "verification_code": "सत्यापन कोड",
        "sending_code": "सत्यापन कोड भेजा जा रहा है…",
        "code_sent": "हमने {phone} पर 6 अंकों का कोड भेजा है।",
        "code_send_failed": "कोड नहीं भेजा जा सका: {error}",
        "resend_code": "कोड फिर से भेजें",
        "background_info": "पृष्ठभूमि जानकारी",
        "age": "आयु",
        "education": "शिक्षा",
        "experience": "कृषि अनुभव",
        "motivation": "प्रेरणा",
        "document_upload": "दस्तावेज़ अपलोड",
        "upload_desc": "समर्थित प्रारूप: JPG, PNG, PDF (अधिकतम 5MB)। दस्तावेज़ न हो तो छोड़ें।",
        "file_path": "फ़ाइल पथ",
        "attach": "जोड़ें",
        "remove": "हटाएँ",
        "document_type": "दस्तावेज़ का प्रकार",
        "no_attachments": "कोई दस्तावेज़ नहीं जोड़ा गया।",
        "registration_successful": "पंजीकरण सफल!",
        "application_submitted": "आवेदन जमा हो गया!",
        "reference_id": "संदर्भ आईडी",
        "status": "स्थिति",
        "status_pending": "लंबित",
        "status_accepted": "स्वीकृत",
        "status_rejected": "अस्वीकृत",
        "verification_message": "हमारी टीम आपके विवरण सत्यापित करेगी और 24-48 घंटों में संपर्क करेगी।",
        "receipt_idle": "रसीद का अनुरोध अभी नहीं किया गया।",
        "receipt_pending": "आपकी आवेदन रसीद डाउनलोड हो रही है…",
        "receipt_succeeded": "रसीद {path} में सहेजी गई",
        "receipt_failed": "रसीद डाउनलोड विफल: {error}",
        "retry_receipt": "रसीद पुनः प्रयास करें",
        "our_impact": "हमारा प्रभाव",
        "farmers": "किसानों तक पहुँच",
        "villages": "गाँव",
        "programs": "कार्यक्रम",
        "states": "राज्य",
        "testimonials": "खेतों से आवाज़ें",
        "milestones": "प्रमुख उपलब्धियाँ",
        "search": "उपलब्धियाँ खोजें…",
        "community_stats": "{stories} सफलता की कहानियाँ · {satisfaction}% संतुष्टि · {income}% औसत आय वृद्धि",
        "err_required": "{label} आवश्यक है",
        "err_min_length": "{label} कम से कम {min} अक्षर का होना चाहिए",
        "err_max_length": "{label} अधिकतम {max} अक्षर का हो सकता है",
        "err_range": "{label} {min} और {max} के बीच होनी चाहिए",
        "err_number": "{label} एक संख्या होनी चाहिए",
        "err_integer": "{label} एक पूर्ण संख्या होनी चाहिए",
        "err_pattern": "{label} मान्य नहीं है",
        "err_phone": "कृपया एक वैध 10 अंकों का भारतीय मोबाइल नंबर दर्ज करें",
        "err_terms": "आपको नियम और शर्तों को स्वीकार करना होगा",
        "err_code_format": "6 अंकों का कोड दर्ज करें",
        "err_code_invalid": "अमान्य सत्यापन कोड",
        "err_not_registered": "यह मोबाइल नंबर सर्वर पर पंजीकृत नहीं है ({message})।",
        "err_document_type": "कृपया एक दस्तावेज़ प्रकार चुनें।",
        "err_unsupported_type": "अमान्य फ़ाइल प्रारूप। केवल JPG, PNG और PDF फाइलें अनुमत हैं।",
        "err_too_large": "फ़ाइल का आकार 5MB की सीमा से अधिक है।",
        "err_upload": "यह फ़ाइल संलग्न नहीं की जा सकती।",
        "err_file_missing": "फ़ाइल नहीं मिली: {path}",
        "err_submission": "जमा करना विफल: {message}",
        "err_network": "सर्वर से संपर्क नहीं हो सका ({message})। अपना कनेक्शन जाँचें और पुनः प्रयास करें।",
    },
}


def translate(key: str, language: str = "en", **params) -> str:
    """Look up ``key`` in ``language``, falling back to English, then to the key itself."""
    text = TRANSLATIONS.get(language, {}).get(key) or TRANSLATIONS["en"].get(key) or key
    if params:
        try:
            return text.format(**params)
        except (KeyError, IndexError):
            return text
    return text


class LanguageContext:
    def __init__(self, language: str = "hi", prefs_path: Optional[Path] = None) -> None:
        self._prefs_path = prefs_path
        self._listeners: List[Callable[[str], None]] = []
        saved = self._load_saved()
        self._language = saved or (language if language in SUPPORTED_LANGUAGES else "hi")

    @property
    def language(self) -> str:
        return self._language

    def t(self, key: str, **params) -> str:
        return translate(key, self._language, **params)

    def localized(self, en_value: str, hi_value: Optional[str]) -> str:
        """Pick the Hindi variant of a content field when Hindi is active and present."""
        if self._language == "hi" and hi_value:
            return hi_value
        return en_value

    def set_language(self, language: str) -> None:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language {language!r}")
        if language == self._language:
            return
        self._language = language
        log.info("Language switched to %s", language)
        self._save()
        for listener in list(self._listeners):
            listener(language)

    def toggle(self) -> str:
        self.set_language("en" if self._language == "hi" else "hi")
        return self._language

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # -- Persistence ---------------------------------------------------------

    def _load_saved(self) -> Optional[str]:
        if not self._prefs_path or not self._prefs_path.exists():
            return None
        try:
            data = yaml.safe_load(self._prefs_path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            log.warning("Could not read language preference: %s", e)
            return None
        lang = data.get("language") if isinstance(data, dict) else None
        return lang if lang in SUPPORTED_LANGUAGES else None

    def _save(self) -> None:
        if not self._prefs_path:
            return
        try:
            self._prefs_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._prefs_path, "w", encoding="utf-8") as f:
                yaml.safe_dump({"language": self._language}, f, default_flow_style=False)
        except OSError as e:
            log.warning("Could not save language preference: %s", e)
