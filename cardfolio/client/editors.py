"""
Section editors.

Every editor loads its section once, keeps edits local and saves the whole
object back after checking that the session is still valid. List editors keep
each row under a local key so several rows can be edited, saved or removed
independently while another row is being saved.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Type
from urllib.parse import urlencode

from pydantic import ValidationError

from cardfolio.domain import profile as profile_rules
from cardfolio.domain.contact import contact_problem
from cardfolio.domain.richtext import Format, FormatResult, apply_format
from cardfolio.domain.uploads import LOGO_RULES, RASTER_RULES, ImageRules
from cardfolio.schemas import (
    AboutCategory,
    Award,
    BlogCategoryIn,
    BlogPostIn,
    Brand,
    CamelModel,
    ContactMessageOut,
    ContactSubmission,
    Education,
    Navbar,
    PersonalInfo,
    PortfolioCategory,
    PortfolioProject,
    PortfolioSettings,
    PricingFeature,
    PricingPlan,
    Profile,
    Reference,
    Service,
    SkillCategory,
    Testimonial,
    WorkExperience,
)

from .drafts import Draft, merge_by_position, new_key, strip_id, unwrap, wrap
from .exceptions import (
    LOGIN_REQUIRED_MESSAGE,
    ApiError,
    MissingCredentialsError,
    ResponseShapeError,
    ServerRejectedError,
    SessionExpiredError,
)
from .preview import render_preview
from .session import AppSession
from .uploader import ImageUploader, LocalFile

logger = logging.getLogger(__name__)

LOADING_TIMEOUT_SECONDS = 10.0


class SectionEditor:
    label = "Data"
    load_path = ""
    save_path = ""
    save_method = "PUT"
    model: Optional[Type[CamelModel]] = None
    preview_template: Optional[str] = None

    def __init__(self, session: AppSession, *, clock: Callable[[], float] = time.monotonic):
        self.session = session
        self.clock = clock
        self.data: Any = self.default_data()
        self.loading = False
        self.loaded = False
        self.saving = False
        self.error: Optional[str] = None
        self.loading_started_at: Optional[float] = None
        self._load_attempted = False
        self._timed_out = False

    # ------------------------------------------------------------------ hooks
    def default_data(self) -> Any:
        return self.model().dump() if self.model else {}

    def extract(self, payload: Any) -> Any:
        """Pick this editor's part out of the GET payload."""
        return payload

    def parse(self, payload: Any) -> Any:
        if self.model is None:
            return payload
        try:
            return self.model.model_validate(payload or {}).dump()
        except ValidationError as exc:
            raise ResponseShapeError(f"Unexpected {self.label.lower()} data from server", original_error=exc) from exc

    def serialize(self) -> Any:
        return self.data

    def validate(self) -> Optional[str]:
        return None

    def apply_loaded(self, data: Any) -> None:
        self.data = data

    def apply_saved(self, data: Any) -> None:
        self.apply_loaded(data)

    # ------------------------------------------------------------------ state
    @property
    def notifier(self):
        return self.session.notifier

    @property
    def loading_timed_out(self) -> bool:
        if self.loading and self.loading_started_at is not None:
            return self.clock() - self.loading_started_at >= LOADING_TIMEOUT_SECONDS
        return self._timed_out

    def _login_required(self) -> bool:
        if self.session.token:
            return False
        self.notifier.error(LOGIN_REQUIRED_MESSAGE)
        return True

    def reset(self) -> None:
        """Forget everything, as if the editor was closed; the next load() fetches again."""
        self.data = self.default_data()
        self.loading = False
        self.loaded = False
        self.saving = False
        self.error = None
        self.loading_started_at = None
        self._load_attempted = False
        self._timed_out = False

    # ------------------------------------------------------------------ load / save
    def load(self) -> bool:
        if self._load_attempted:
            return self.loaded
        self._load_attempted = True
        if self._login_required():
            return False
        self.loading = True
        self.loading_started_at = self.clock()
        self._timed_out = False
        self.error = None
        try:
            envelope = self.session.api.get(self.load_path)
            self.apply_loaded(self.parse(self.extract(envelope.data)))
            self.loaded = True
        except (MissingCredentialsError, SessionExpiredError) as exc:
            self.error = exc.message
            self.notifier.error(exc.message)
        except ServerRejectedError as exc:
            self.error = exc.message
            self.notifier.error(exc.message)
        except ApiError as exc:
            logger.warning("loading %s failed, using defaults: %s", self.label, exc)
            self.error = exc.message
            self.apply_loaded(self.default_data())
        finally:
            self._timed_out = self.clock() - self.loading_started_at >= LOADING_TIMEOUT_SECONDS
            self.loading = False
        return self.loaded

    def save(self) -> bool:
        if self._login_required():
            return False
        problem = self.validate()
        if problem:
            self.notifier.error(problem)
            return False
        self.saving = True
        try:
            self.session.verify()
            envelope = self.session.api.request(
                self.save_method, self.save_path or self.load_path, json=self.serialize()
            )
            self.apply_saved(self.parse(envelope.data))
        except ApiError as exc:
            logger.info("saving %s failed: %s", self.label, exc)
            self.notifier.error(exc.message)
            return False
        finally:
            self.saving = False
        self.notifier.success(envelope.message or f"{self.label} saved successfully")
        return True

    # ------------------------------------------------------------------ preview
    def preview_data(self) -> Any:
        return self.data

    def preview(self) -> str:
        if not self.preview_template:
            raise NotImplementedError(f"{type(self).__name__} has no preview")
        return render_preview(self.preview_template, self.preview_data(), self.session.api.base_url)


class ListSectionEditor(SectionEditor):
    item_model: Type[CamelModel] = CamelModel
    item_label = "Item"
    # endpoint with POST (create) and PUT/DELETE /{id}; None means whole-list saves only
    item_path: Optional[str] = None
    upload_path: Optional[str] = None
    upload_field = "image"
    upload_rules: ImageRules = RASTER_RULES
    image_field = "image"

    def __init__(self, session: AppSession, **kwargs):
        super().__init__(session, **kwargs)
        self.saving_keys: set[str] = set()
        self.uploading_keys: set[str] = set()

    def default_data(self) -> list:
        return []

    def parse_item(self, payload: Any) -> dict:
        try:
            return self.item_model.model_validate(payload or {}).dump()
        except ValidationError as exc:
            raise ResponseShapeError(f"Unexpected {self.item_label.lower()} data from server", original_error=exc) from exc

    def parse(self, payload: Any) -> list:
        if not isinstance(payload, list):
            raise ResponseShapeError(f"Expected a list of {self.label.lower()}")
        return [self.parse_item(item) for item in payload]

    def apply_loaded(self, items: Any) -> None:
        self.data = wrap(items)

    def apply_saved(self, items: Any) -> None:
        self.data = merge_by_position(self.data, items)

    def serialize(self) -> Any:
        return unwrap(self.data)

    @property
    def items(self) -> list[dict]:
        return [draft.data for draft in self.data]

    def preview_data(self) -> Any:
        return self.items

    # ------------------------------------------------------------------ local edits
    def new_item(self) -> dict:
        return strip_id(self.item_model().dump())

    def add(self, **fields) -> Draft:
        draft = Draft(new_key(), {**self.new_item(), **fields})
        self.data.append(draft)
        return draft

    def find(self, key: str) -> Draft:
        for draft in self.data:
            if draft.key == key:
                return draft
        raise KeyError(key)

    def update(self, key: str, **changes) -> Draft:
        draft = self.find(key)
        changes.pop("id", None)
        draft.data.update(changes)
        return draft

    def remove(self, key: str) -> Draft:
        draft = self.find(key)
        self.data.remove(draft)
        return draft

    def is_saving(self, key: str) -> bool:
        return key in self.saving_keys

    def validate_item(self, data: dict) -> Optional[str]:
        return None

    def validate(self) -> Optional[str]:
        for draft in self.data:
            problem = self.validate_item(draft.data)
            if problem:
                return problem
        return None

    # ------------------------------------------------------------------ per-row calls
    def save_item(self, key: str) -> bool:
        draft = self.find(key)
        if self._login_required():
            return False
        problem = self.validate_item(draft.data)
        if problem:
            self.notifier.error(problem)
            return False
        self.saving_keys.add(key)
        try:
            self.session.verify()
            api = self.session.api
            if self.item_path:
                payload = strip_id(draft.data)
                if draft.is_new:
                    envelope = api.post(self.item_path, payload)
                else:
                    envelope = api.put(f"{self.item_path}/{draft.id}", payload)
                draft.data = self.parse_item(envelope.data)
            else:
                envelope = api.request(self.save_method, self.save_path or self.load_path, json=self.serialize())
                self.apply_saved(self.parse(envelope.data))
        except ApiError as exc:
            logger.info("saving %s failed: %s", self.item_label, exc)
            self.notifier.error(exc.message)
            return False
        finally:
            self.saving_keys.discard(key)
        self.notifier.success(envelope.message or f"{self.item_label} saved successfully")
        return True

    def save_all(self) -> bool:
        return self.save()

    def delete(self, key: str) -> bool:
        """Remove a row; saved rows are deleted on the server first."""
        draft = self.find(key)
        if draft.is_new:
            self.remove(key)
            return True
        if not self.item_path:
            self.remove(key)
            return self.save()
        if self._login_required():
            return False
        self.saving_keys.add(key)
        try:
            self.session.verify()
            envelope = self.session.api.delete(f"{self.item_path}/{draft.id}")
        except ApiError as exc:
            self.notifier.error(exc.message)
            return False
        finally:
            self.saving_keys.discard(key)
        self.remove(key)
        self.notifier.success(envelope.message or f"{self.item_label} deleted successfully")
        return True

    def upload_image(self, key: str, file: LocalFile) -> Optional[str]:
        """Upload ``file`` and put its path in the row's image field."""
        if not self.upload_path:
            raise NotImplementedError(f"{type(self).__name__} does not accept uploads")
        draft = self.find(key)
        uploader = ImageUploader(self.session, self.upload_path, self.upload_field, self.upload_rules)
        self.uploading_keys.add(key)
        try:
            path = uploader.upload(file)
        finally:
            self.uploading_keys.discard(key)
        if path:
            draft.data[self.image_field] = path
        return path

    def image_url(self, key: str) -> str:
        return self.session.api.asset_url(self.find(key).data.get(self.image_field))


# ---------------------------------------------------------------------- profile
class ProfileEditor(SectionEditor):
    label = "Profile"
    model = Profile
    preview_template = "card.html"

    def __init__(self, session: AppSession, user_id: Optional[str] = None, **kwargs):
        self._user_id = user_id
        self._saved_picture: Optional[str] = None
        super().__init__(session, **kwargs)

    @property
    def user_id(self) -> str:
        return self._user_id or self.session.user_id or ""

    @property
    def load_path(self) -> str:
        return f"/api/profile/{self.user_id}"

    def _login_required(self) -> bool:
        # a token without a stored user cannot address a profile
        if super()._login_required():
            return True
        if not self.user_id:
            self.notifier.error(LOGIN_REQUIRED_MESSAGE)
            return True
        return False

    def apply_loaded(self, data: Any) -> None:
        self.data = profile_rules.fill_generated_avatar(data, user_id=self.user_id)
        self._saved_picture = self.data.get("profilePicture")

    def set_field(self, name: str, value: Any) -> None:
        self.data[name] = value

    @property
    def active_fields(self) -> tuple[str, ...]:
        return profile_rules.active_fields(self.data.get("userType") or profile_rules.UserType.STUDENT)

    def set_user_type(self, user_type: str) -> None:
        self.data = profile_rules.switch_user_type(self.data, user_type)

    def choose_avatar(self, option: str) -> None:
        self.data = profile_rules.apply_avatar_option(self.data, option, user_id=self.user_id)

    def set_custom_avatar_url(self, url: str) -> None:
        self.data = profile_rules.apply_custom_avatar_url(self.data, url)

    def set_gender(self, gender: str) -> None:
        self.data = profile_rules.apply_gender(self.data, gender)

    def upload_picture(self, file: LocalFile) -> Optional[str]:
        if not self.user_id:
            self.notifier.error(LOGIN_REQUIRED_MESSAGE)
            return None
        uploader = ImageUploader(self.session, f"{self.load_path}/picture", "profilePicture")
        path = uploader.upload(file)
        if path:
            # the server stores the new picture on the profile right away
            self.data["profilePicture"] = path
            self._saved_picture = path
        return path

    def remove_picture(self) -> bool:
        if not self._saved_picture:
            self.data["profilePicture"] = None
            return True
        if self._login_required():
            return False
        try:
            self.session.verify()
            envelope = self.session.api.delete(f"{self.load_path}/picture")
        except ApiError as exc:
            self.notifier.error(exc.message)
            return False
        self.data["profilePicture"] = None
        self._saved_picture = None
        self.notifier.success(envelope.message or "Profile picture removed")
        return True

    @property
    def picture_url(self) -> str:
        return self.session.api.asset_url(self.data.get("profilePicture") or self.data.get("avatar"))

    def preview(self) -> str:
        return render_preview(
            self.preview_template,
            None,
            self.session.api.base_url,
            card=profile_rules.card_view(self.data),
        )


# ---------------------------------------------------------------------- about
class PersonalInfoEditor(SectionEditor):
    label = "Personal information"
    model = PersonalInfo
    load_path = "/api/about"
    save_path = "/api/about/personal"
    save_method = "PATCH"
    preview_template = "preview/about.html"

    def extract(self, payload: Any) -> Any:
        return (payload or {}).get("personal") if isinstance(payload, dict) else payload

    def set_field(self, name: str, value: Any) -> None:
        self.data[name] = value

    def preview_data(self) -> Any:
        return {"personal": self.data}


class AboutListEditor(ListSectionEditor):
    about_key = ""
    load_path = "/api/about"
    save_method = "PATCH"
    upload_path = "/api/about/upload"
    preview_template = "preview/about.html"

    @property
    def save_path(self) -> str:
        return f"/api/about/{self.about_key}"

    def extract(self, payload: Any) -> Any:
        if not isinstance(payload, dict):
            raise ResponseShapeError("Expected the about document")
        return payload.get(self.about_key) or []

    def preview_data(self) -> Any:
        return {self.about_key: self.items}


class ServicesEditor(AboutListEditor):
    label = "Services"
    item_label = "Service"
    about_key = "services"
    item_model = Service


class TestimonialsEditor(AboutListEditor):
    label = "Testimonials"
    item_label = "Testimonial"
    about_key = "testimonials"
    item_model = Testimonial
    image_field = "avatar"


class PricingEditor(AboutListEditor):
    label = "Pricing plans"
    item_label = "Pricing plan"
    about_key = "pricing"
    item_model = PricingPlan
    upload_path = None

    def add_feature(self, key: str, text: str = "", included: bool = True) -> dict:
        feature = strip_id(PricingFeature(text=text, included=included).dump())
        self.find(key).data.setdefault("features", []).append(feature)
        return feature

    def update_feature(self, key: str, index: int, **changes) -> dict:
        feature = self.find(key).data["features"][index]
        changes.pop("id", None)
        feature.update(changes)
        return feature

    def remove_feature(self, key: str, index: int) -> dict:
        return self.find(key).data["features"].pop(index)


class BrandsEditor(AboutListEditor):
    label = "Brands"
    item_label = "Brand"
    about_key = "brands"
    item_model = Brand
    image_field = "src"


# ---------------------------------------------------------------------- blog
class BlogCategoriesEditor(ListSectionEditor):
    label = "Blog categories"
    item_label = "Blog category"
    item_model = BlogCategoryIn
    load_path = "/api/blog-categories"
    item_path = "/api/blog-categories"
    save_method = "PATCH"

    def validate_item(self, data: dict) -> Optional[str]:
        name = (data.get("name") or "").strip()
        if not name:
            return "Category name is required"
        same = [d for d in self.items if (d.get("name") or "").strip().lower() == name.lower()]
        if len(same) > 1:
            return "Category already exists"
        return None


class BlogPostsEditor(ListSectionEditor):
    label = "Blog posts"
    item_label = "Blog"
    item_model = BlogPostIn
    load_path = "/api/blogs"
    item_path = "/api/blogs"
    save_method = "PATCH"
    upload_path = "/api/blogs/upload"
    preview_template = "preview/blog.html"

    def validate_item(self, data: dict) -> Optional[str]:
        if not ((data.get("title") or "").strip() and (data.get("content") or "").strip() and data.get("category")):
            return "Title, content and category are required"
        return None

    def format_content(self, key: str, start: int, end: int, kind: Format | str) -> FormatResult:
        draft = self.find(key)
        result = apply_format(draft.data.get("content") or "", start, end, kind)
        draft.data["content"] = result.text
        return result


# ---------------------------------------------------------------------- portfolio
class PortfolioCategoriesEditor(ListSectionEditor):
    label = "Portfolio categories"
    item_label = "Category"
    item_model = PortfolioCategory
    load_path = "/api/portfolio/categories"
    item_path = "/api/portfolio/categories"
    save_path = "/api/portfolio/categories/bulk"
    save_method = "POST"

    def serialize(self) -> Any:
        return {"categories": unwrap(self.data)}

    def validate_item(self, data: dict) -> Optional[str]:
        name = (data.get("name") or "").strip()
        if not name:
            return "Category name is required"
        same = [d for d in self.items if (d.get("name") or "").strip().lower() == name.lower()]
        if len(same) > 1:
            return "Category with this name already exists"
        return None


class PortfolioProjectsEditor(ListSectionEditor):
    label = "Projects"
    item_label = "Project"
    item_model = PortfolioProject
    load_path = "/api/portfolio/projects"
    item_path = "/api/portfolio/projects"
    save_path = "/api/portfolio/projects/bulk"
    save_method = "POST"
    upload_path = "/api/portfolio/upload-image"
    preview_template = "preview/portfolio.html"

    def serialize(self) -> Any:
        return {"projects": unwrap(self.data)}

    def validate_item(self, data: dict) -> Optional[str]:
        if not (data.get("title") or "").strip():
            return "Project title is required"
        return None

    def clear_image(self, key: str) -> None:
        """The stored file goes away when the cleared project is saved."""
        self.find(key).data["image"] = ""

    def preview_data(self) -> Any:
        return {"projects": self.items}


class PortfolioSettingsEditor(SectionEditor):
    label = "Portfolio settings"
    model = PortfolioSettings
    load_path = "/api/portfolio"
    save_path = "/api/portfolio/settings"

    def __init__(self, session: AppSession, **kwargs):
        super().__init__(session, **kwargs)
        self.is_published = False

    def extract(self, payload: Any) -> Any:
        if isinstance(payload, dict) and "settings" in payload:
            self.is_published = bool(payload.get("isPublished"))
            return payload["settings"]
        return payload

    def set_field(self, name: str, value: Any) -> None:
        self.data[name] = value

    def set_published(self, is_published: bool) -> bool:
        if self._login_required():
            return False
        try:
            self.session.verify()
            envelope = self.session.api.put("/api/portfolio/publish", {"isPublished": bool(is_published)})
        except ApiError as exc:
            self.notifier.error(exc.message)
            return False
        self.is_published = bool((envelope.data or {}).get("isPublished"))
        self.notifier.success(envelope.message or "Portfolio updated")
        return True


# ---------------------------------------------------------------------- resume
class ResumeListEditor(ListSectionEditor):
    segment = ""
    save_method = "PATCH"
    upload_path = "/api/resume/upload-logo"
    upload_field = "logo"
    upload_rules = LOGO_RULES
    image_field = "logo"
    preview_template = "preview/resume.html"
    document_key = ""

    @property
    def load_path(self) -> str:
        return f"/api/resume/{self.segment}"

    @property
    def item_path(self) -> str:
        return self.load_path

    def preview_data(self) -> Any:
        return {self.document_key: self.items}


class EducationEditor(ResumeListEditor):
    label = "Education"
    item_label = "Education entry"
    item_model = Education
    segment = "education"
    document_key = "education"


class WorkExperienceEditor(ResumeListEditor):
    label = "Work experience"
    item_label = "Work experience"
    item_model = WorkExperience
    segment = "work-experiences"
    document_key = "workExperiences"


class AwardsEditor(ResumeListEditor):
    label = "Awards"
    item_label = "Award"
    item_model = Award
    segment = "awards"
    document_key = "awards"


class ReferencesEditor(ResumeListEditor):
    label = "References"
    item_label = "Reference"
    item_model = Reference
    segment = "references"
    document_key = "references"
    image_field = "image"


class SkillsEditor(ResumeListEditor):
    label = "Skills"
    item_label = "Skill category"
    item_model = SkillCategory
    segment = "skills"
    document_key = "skills"
    upload_path = None


class AboutCategoriesEditor(ResumeListEditor):
    """More-about-me groups: a title, an icon name and a list of short points."""

    label = "About categories"
    item_label = "About category"
    item_model = AboutCategory
    segment = "about-categories"
    document_key = "aboutCategories"
    upload_path = None

    def validate_item(self, data: dict) -> Optional[str]:
        if not (data.get("title") or "").strip():
            return "Category title is required"
        return None

    def add_point(self, key: str, text: str) -> bool:
        text = (text or "").strip()
        if not text:
            self.notifier.error("Please enter an item name")
            return False
        self.find(key).data.setdefault("items", []).append(text)
        return True

    def update_point(self, key: str, index: int, text: str) -> None:
        self.find(key).data["items"][index] = text

    def remove_point(self, key: str, index: int) -> str:
        return self.find(key).data["items"].pop(index)


# ---------------------------------------------------------------------- contact
class ContactFormEditor(SectionEditor):
    """The public form on a card; sending needs no login."""

    label = "Message"
    model = ContactSubmission
    save_path = "/api/contact"
    save_method = "POST"

    def __init__(self, session: AppSession, recipient_id: str, **kwargs):
        self.recipient_id = recipient_id
        super().__init__(session, **kwargs)
        self.sent: Optional[dict] = None

    def default_data(self) -> dict:
        return {**ContactSubmission().dump(), "recipientId": self.recipient_id}

    def set_field(self, name: str, value: Any) -> None:
        self.data[name] = value

    def validate(self) -> Optional[str]:
        return contact_problem(self.data.get("name"), self.data.get("email"), self.data.get("message"))

    def load(self) -> bool:
        self.loaded = True
        return True

    def save(self) -> bool:
        problem = self.validate()
        if problem:
            self.notifier.error(problem)
            return False
        self.saving = True
        try:
            envelope = self.session.api.post(self.save_path, self.serialize(), auth=False)
        except ApiError as exc:
            logger.info("sending contact message failed: %s", exc)
            self.notifier.error(exc.message)
            return False
        finally:
            self.saving = False
        self.sent = envelope.data
        self.data = self.default_data()
        self.notifier.success(envelope.message or "Message sent successfully!")
        return True

    send = save


class ContactInboxEditor(SectionEditor):
    """The owner's inbox: one page of messages plus counts, filtered by search and status."""

    label = "Messages"

    def __init__(self, session: AppSession, **kwargs):
        super().__init__(session, **kwargs)
        self.search = ""
        self.status = "all"
        self.page = 1
        self.limit = 10
        self.summary: dict = {}

    def default_data(self) -> dict:
        return {"messages": [], "pagination": {}, "stats": {}}

    @property
    def load_path(self) -> str:
        params = {"page": self.page, "limit": self.limit}
        if self.search:
            params["search"] = self.search
        if self.status and self.status != "all":
            params["status"] = self.status
        return f"/api/contact?{urlencode(params)}"

    def parse_message(self, payload: Any) -> dict:
        try:
            return ContactMessageOut.model_validate(payload or {}).dump()
        except ValidationError as exc:
            raise ResponseShapeError("Unexpected message data from server", original_error=exc) from exc

    def parse(self, payload: Any) -> dict:
        if not isinstance(payload, dict) or not isinstance(payload.get("messages"), list):
            raise ResponseShapeError("Expected the contact inbox")
        return {
            "messages": [self.parse_message(item) for item in payload["messages"]],
            "pagination": payload.get("pagination") or {},
            "stats": payload.get("stats") or {},
        }

    @property
    def messages(self) -> list[dict]:
        return self.data["messages"]

    def find(self, message_id: int) -> dict:
        for message in self.messages:
            if message["id"] == message_id:
                return message
        raise KeyError(message_id)

    def _replace(self, message: dict) -> dict:
        for index, current in enumerate(self.messages):
            if current["id"] == message["id"]:
                self.messages[index] = message
        return message

    def refresh(self, *, search: Optional[str] = None, status: Optional[str] = None, page: Optional[int] = None) -> bool:
        """Change the filters and fetch again."""
        if search is not None:
            self.search = search
            self.page = 1
        if status is not None:
            self.status = status
            self.page = 1
        if page is not None:
            self.page = max(int(page), 1)
        self._load_attempted = False
        return self.load()

    def _call(self, method: str, path: str, json: Any = None):
        if self._login_required():
            return None
        try:
            self.session.verify()
            return self.session.api.request(method, path, json=json)
        except ApiError as exc:
            logger.info("%s %s failed: %s", method, path, exc)
            self.notifier.error(exc.message)
            return None

    def open(self, message_id: int) -> Optional[dict]:
        envelope = self._call("GET", f"/api/contact/{message_id}")
        if envelope is None:
            return None
        return self._replace(self.parse_message(envelope.data))

    def reply(self, message_id: int, text: str) -> bool:
        if not (text or "").strip():
            self.notifier.error("Reply message is required")
            return False
        envelope = self._call("POST", f"/api/contact/{message_id}/reply", {"replyMessage": text})
        if envelope is None:
            return False
        self._replace(self.parse_message(envelope.data))
        self.notifier.success(envelope.message or "Reply sent successfully!")
        return True

    def set_status(self, message_id: int, *, status: Optional[str] = None, read: Optional[bool] = None) -> bool:
        changes = {key: value for key, value in (("status", status), ("read", read)) if value is not None}
        envelope = self._call("PUT", f"/api/contact/{message_id}/status", changes)
        if envelope is None:
            return False
        self._replace(self.parse_message(envelope.data))
        self.notifier.success(envelope.message or "Message updated successfully")
        return True

    def mark_all_read(self) -> bool:
        envelope = self._call("PUT", "/api/contact/actions/mark-all-read")
        if envelope is None:
            return False
        for message in self.messages:
            message["read"] = True
        self.notifier.success(envelope.message)
        return True

    def delete(self, message_id: int) -> bool:
        envelope = self._call("DELETE", f"/api/contact/{message_id}")
        if envelope is None:
            return False
        self.data["messages"] = [m for m in self.messages if m["id"] != message_id]
        self.notifier.success(envelope.message or "Message deleted successfully")
        return True

    def load_summary(self) -> dict:
        """Totals for the inbox header: total, pending, replied, unread, recent."""
        envelope = self._call("GET", "/api/contact/stats/summary")
        if envelope is not None:
            self.summary = dict(envelope.data or {})
        return self.summary


# ---------------------------------------------------------------------- navbar
class NavbarEditor(SectionEditor):
    label = "Navbar"
    model = Navbar
    load_path = "/api/navbar"
    preview_template = "preview/navbar.html"

    def set_field(self, name: str, value: Any) -> None:
        self.data[name] = value

    def upload_logo(self, file: LocalFile) -> Optional[str]:
        path = ImageUploader(self.session, "/api/navbar/upload-logo", "logo", LOGO_RULES).upload(file)
        if path:
            self.data["logo"] = path
        return path

    def delete(self) -> bool:
        if self._login_required():
            return False
        try:
            self.session.verify()
            envelope = self.session.api.delete(self.load_path)
        except ApiError as exc:
            self.notifier.error(exc.message)
            return False
        self.data = self.default_data()
        self.notifier.success(envelope.message or "Navbar deleted")
        return True
