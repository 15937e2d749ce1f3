"""
Listing creation wizard.

Eleven steps fill one ListingDraft; nothing is written to the backend until
``publish``. Photos are the exception: they go to the image host as they are
added, and the draft keeps their URLs.
"""

from collections.abc import Iterable
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any

from staybook.exceptions import AuthExpiredError, ValidationError
from staybook.logging import get_logger
from staybook.types.auth import Session
from staybook.types.listings import Listing, ListingBasics, ListingDraft, ListingSummary

if TYPE_CHECKING:
    from staybook.clients.images import ImageSource, ImagesClient, UploadBatch
    from staybook.clients.listings import ListingsClient

logger = get_logger("wizard")


@dataclass(frozen=True)
class WizardStep:
    number: int
    key: str
    title: str
    description: str


STEPS: tuple[WizardStep, ...] = (
    WizardStep(1, "property_type", "Property Type", "What type of place will you host?"),
    WizardStep(2, "space_type", "Space Type", "How will guests use your space?"),
    WizardStep(3, "location", "Location", "Where's your place located?"),
    WizardStep(4, "basics", "Basic Details", "Share some basics about your place"),
    WizardStep(5, "amenities", "Amenities", "What amenities do you offer?"),
    WizardStep(6, "photos", "Photos", "Add photos of your place"),
    WizardStep(7, "highlights", "Highlights", "What makes your place special?"),
    WizardStep(8, "title", "Title", "Give your place a title"),
    WizardStep(9, "description", "Description", "Create your description"),
    WizardStep(10, "pricing", "Pricing", "Set your price"),
    WizardStep(11, "review", "Review", "Review your listing"),
)

PROPERTY_TYPES = ("house", "apartment", "cabin", "mansion", "dome", "villa", "castle", "hotel")
SPACE_TYPES = ("entire", "private", "shared")

TITLE_MAX_LENGTH = 50

# (minimum, maximum, step) per basic-details counter
BASICS_LIMITS: dict[str, tuple[float, float, float]] = {
    "max_guests": (1, 16, 1),
    "bedrooms": (1, 8, 1),
    "beds": (1, 16, 1),
    "bathrooms": (0.5, 8, 0.5),
}


def adjust_basics(basics: ListingBasics, name: str, increment: bool) -> ListingBasics:
    """
    Step one counter up or down.

    A step that would leave the counter's range leaves ``basics`` unchanged.

    Raises:
        ValueError: For an unknown counter
    """
    if name not in BASICS_LIMITS:
        raise ValueError(f"Unknown basic detail: {name}")
    low, high, step = BASICS_LIMITS[name]
    value = getattr(basics, name) + (step if increment else -step)
    if value < low or value > high:
        return basics
    return replace(basics, **{name: value})


def display_title(draft: ListingDraft) -> str:
    """The draft's title, or ``"<property type> in <address>"`` when blank."""
    return draft.title.strip() or f"{draft.property_type} in {draft.address}"


def summarize(draft: ListingDraft) -> ListingSummary:
    return ListingSummary(
        title=display_title(draft),
        property_type=draft.property_type,
        space_type=draft.space_type,
        address=draft.address,
        max_guests=draft.basics.max_guests,
        bedrooms=draft.basics.bedrooms,
        beds=draft.basics.beds,
        bathrooms=draft.basics.bathrooms,
        price_per_night=draft.price_per_night,
        currency=draft.currency,
        photo_count=len(draft.photos),
        amenity_count=len(draft.amenities),
        highlight_count=len(draft.highlights),
    )


def validate_draft(draft: ListingDraft) -> None:
    """
    Check a draft is complete enough to publish.

    Raises:
        ValidationError: Naming the first missing or invalid field
    """
    if not draft.property_type:
        raise ValidationError("Choose a property type", code="MISSING_PROPERTY_TYPE")
    if draft.space_type not in SPACE_TYPES:
        raise ValidationError("Choose how guests will use the space", code="MISSING_SPACE_TYPE")
    if not draft.address.strip():
        raise ValidationError("Enter the address of the place", code="MISSING_ADDRESS")
    if len(draft.title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters", code="TITLE_TOO_LONG"
        )
    if draft.price_per_night <= 0:
        raise ValidationError("Set a nightly price above zero", code="INVALID_PRICE")


def listing_row(draft: ListingDraft, user_id: str) -> dict[str, Any]:
    """The ``listings`` row a draft publishes as."""
    return {
        "user_id": user_id,
        "title": display_title(draft),
        "description": draft.description,
        "property_type": draft.property_type,
        "access_type": draft.space_type,
        "address": draft.address,
        "latitude": draft.latitude,
        "longitude": draft.longitude,
        "max_guests": draft.basics.max_guests,
        "bedrooms": draft.basics.bedrooms,
        "beds": draft.basics.beds,
        "bathrooms": draft.basics.bathrooms,
        "amenities": list(draft.amenities),
        "photos": list(draft.photos),
        "highlights": list(draft.highlights),
        "price_per_night": draft.price_per_night,
        "currency": draft.currency,
        "status": "published",
    }


class ListingWizard:
    """Step-by-step listing creation."""

    def __init__(
        self,
        listings: "ListingsClient",
        images: "ImagesClient | None" = None,
        draft: ListingDraft | None = None,
    ) -> None:
        """
        Args:
            listings: Client the finished listing is inserted through
            images: Image host client for the photos step
            draft: Form state to resume from
        """
        self.listings = listings
        self.images = images
        self.draft = draft or ListingDraft()
        self._index = 0
        self.published: Listing | None = None

    @property
    def step(self) -> WizardStep:
        return STEPS[self._index]

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(STEPS) - 1

    def next(self) -> WizardStep:
        """Advance one step; stays on the review step."""
        if not self.is_last:
            self._index += 1
        return self.step

    def back(self) -> WizardStep:
        """Go back one step; stays on the first step."""
        if not self.is_first:
            self._index -= 1
        return self.step

    def update(self, name: str, value: Any) -> None:
        """
        Replace one top-level draft field.

        Raises:
            ValueError: For a field the draft does not have
        """
        if name not in {f.name for f in fields(ListingDraft)}:
            raise ValueError(f"Unknown listing field: {name}")
        setattr(self.draft, name, value)

    def toggle(self, name: str, item: str) -> bool:
        """
        Add or remove one amenity or highlight.

        Returns:
            Whether the item is selected afterwards
        """
        if name not in ("amenities", "highlights"):
            raise ValueError(f"Cannot toggle items of {name}")
        selected = list(getattr(self.draft, name))
        if item in selected:
            selected.remove(item)
        else:
            selected.append(item)
        setattr(self.draft, name, selected)
        return item in selected

    def adjust(self, name: str, increment: bool = True) -> ListingBasics:
        """Step a basic-details counter within its bounds."""
        self.draft.basics = adjust_basics(self.draft.basics, name, increment)
        return self.draft.basics

    def add_photos(self, sources: Iterable["ImageSource"]) -> "UploadBatch":
        """
        Upload photos and append their URLs to the draft.

        Photos that uploaded are kept even when others in the batch fail.

        Raises:
            ValidationError: If no image host is configured
        """
        if self.images is None:
            raise ValidationError("Photo uploads are not configured", code="NO_IMAGE_HOST")
        batch = self.images.upload_many(sources)
        self.draft.photos = [*self.draft.photos, *batch.urls]
        return batch

    def remove_photo(self, url: str) -> None:
        self.draft.photos = [photo for photo in self.draft.photos if photo != url]

    def summary(self) -> ListingSummary:
        return summarize(self.draft)

    def publish(self, session: Session | None) -> Listing:
        """
        Validate the draft and insert it as a published listing.

        Args:
            session: The signed-in host's session

        Returns:
            The created Listing

        Raises:
            AuthExpiredError: If nobody is signed in
            ValidationError: If the draft is incomplete
            RemoteRejection: If the backend declines the insert
        """
        if session is None:
            raise AuthExpiredError("NO_SESSION", "User not authenticated")
        validate_draft(self.draft)
        listing = self.listings.create(listing_row(self.draft, session.user.user_id))
        self.published = listing
        logger.info("Published listing %s", listing.listing_id)
        return listing
