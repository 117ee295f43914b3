"""
Google video and image sitemap extensions.

Each extension validates its payload against the Google schema rules and
renders the nested tags that go under a <url> element. Payloads arrive
tagged (SinglePayload or PayloadList), so one page can carry several
videos or images.
"""
from datetime import date, datetime
from typing import Mapping
from urllib.parse import urlparse

from errors import ValidationError
from models import W3C_DATE_HELP, PayloadList, SinglePayload, as_number, parse_w3c_date

VIDEO_NS = "http://www.google.com/schemas/sitemap-video/1.1"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"

YES_NO = ("yes", "no")
ALLOW_DENY = ("allow", "deny")


def _is_w3c_date(value) -> bool:
    return isinstance(value, (datetime, date)) or parse_w3c_date(value) is not None


def _check_choice(fields, key, allowed):
    if key in fields and fields[key] not in allowed:
        raise ValidationError(
            f"Invalid {key} value. Allowed values are {' or '.join(allowed)}."
        )


def _items(value):
    # sub-entries such as video prices may be given as one mapping or a list
    if isinstance(value, (SinglePayload, PayloadList)):
        return list(value.items)
    if isinstance(value, Mapping):
        return [value]
    return list(value)


def _tags(value):
    # a bare string is one tag, not a sequence of characters
    if isinstance(value, str):
        return [value]
    return list(value)


class GoogleVideoExtension:
    name = "google_video"
    prefix = "video"
    namespace = VIDEO_NS
    template = "video.xml.j2"

    required_fields = ("thumbnail_loc", "title", "description")
    required_either_fields = ("content_loc", "player_loc")
    platforms = ("web", "mobile", "tv")
    price_types = ("rent", "own")
    price_resolutions = ("hd", "sd")

    max_description_len = 2048
    max_duration = 28800
    max_uploader_len = 255
    max_tags = 32
    max_category_len = 256

    # rating must be one of 0.0, 0.1, ... 5.0
    rating_values = tuple(round(i * 0.1, 1) for i in range(51))

    def validate(self, loc, payload):
        for fields in payload.items:
            self.validate_fields(loc, fields)

    def validate_fields(self, loc, fields):
        missing = [f for f in self.required_fields if f not in fields]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if not any(f in fields for f in self.required_either_fields):
            raise ValidationError(
                "At least one of the following values are required but missing: "
                + ", ".join(self.required_either_fields)
            )
        if len(fields["description"]) > self.max_description_len:
            raise ValidationError(
                f"The field description must be less than or equal to {self.max_description_len} characters"
            )
        for key in self.required_either_fields:
            if key in fields and fields[key] == loc:
                raise ValidationError(f"The field {key} must not be the same as the <loc> URL.")

        if "duration" in fields:
            duration = as_number(fields["duration"])
            if duration is None or not 1 <= duration <= self.max_duration:
                raise ValidationError(
                    f"The duration value should be between 1 and {self.max_duration}"
                )
        for key in ("expiration_date", "publication_date"):
            if key in fields and not _is_w3c_date(fields[key]):
                raise ValidationError(f"Invalid {key} value. {W3C_DATE_HELP}")
        if "rating" in fields and as_number(fields["rating"]) not in self.rating_values:
            raise ValidationError(
                "Invalid rating value. "
                "Supported values are float numbers in the range 0.0 (low) to 5.0 (high), inclusive."
            )
        if "family_friendly" in fields and fields["family_friendly"] not in YES_NO:
            raise ValidationError(
                "Invalid family_friendly value. "
                "yes (or omitted) if the video can be available with SafeSearch on. "
                "no if the video should be available only with SafeSearch off."
            )

        if "restriction" in fields:
            self._validate_relationship("restriction", fields["restriction"])
        if "platform" in fields:
            platform = fields["platform"]
            self._validate_relationship("platform", platform)
            unknown = [p for p in str(platform["value"]).split(" ") if p not in self.platforms]
            if unknown:
                raise ValidationError(
                    "Invalid platform.relationship value. "
                    f"Expecting a list of space-delimited platform types: {', '.join(self.platforms)}."
                )
        if "price" in fields:
            for price in _items(fields["price"]):
                self._validate_price(price)

        _check_choice(fields, "requires_subscription", YES_NO)
        if "uploader" in fields:
            self._validate_uploader(loc, fields["uploader"])
        _check_choice(fields, "live", YES_NO)
        if "tag" in fields and len(_tags(fields["tag"])) > self.max_tags:
            raise ValidationError(f"The array tag is too large, max {self.max_tags} tags.")
        if "category" in fields and len(fields["category"]) > self.max_category_len:
            raise ValidationError(
                f"Value category is too large, max {self.max_category_len} characters."
            )

    @staticmethod
    def _validate_relationship(key, value):
        if "relationship" in value and value["relationship"] not in ALLOW_DENY:
            raise ValidationError(
                f"Invalid {key}.relationship value. Allowed values are allow or deny."
            )
        if "value" not in value:
            raise ValidationError(f"Value {key}.value is required.")

    def _validate_price(self, price):
        if "currency" not in price:
            raise ValidationError("Value price.currency is required.")
        if "value" not in price:
            raise ValidationError("Value price.value is required.")
        if not isinstance(price["value"], float) or price["value"] <= 0:
            raise ValidationError("Value price.value should be a float value more than 0.")
        if "type" in price and price["type"] not in self.price_types:
            raise ValidationError("Invalid price.type value. Allowed values are rent or own.")
        if "resolution" in price and price["resolution"] not in self.price_resolutions:
            raise ValidationError("Invalid price.resolution value. Allowed values are hd or sd.")

    def _validate_uploader(self, loc, uploader):
        if "value" not in uploader:
            raise ValidationError("Value uploader.value is required.")
        if len(uploader["value"]) > self.max_uploader_len:
            raise ValidationError(
                f"Value uploader.value is too large, max {self.max_uploader_len} characters."
            )
        if "info" in uploader and urlparse(uploader["info"]).hostname != urlparse(loc).hostname:
            raise ValidationError("The uploader.info must be in the same domain as the <loc> tag.")

    def render(self, writer, loc, payload) -> str:
        self.validate(loc, payload)
        videos = []
        for fields in payload.items:
            video = dict(fields)
            for key in ("expiration_date", "publication_date"):
                if key in video:
                    video[key] = writer.format_date(video[key])
            if "price" in video:
                video["price"] = _items(video["price"])
            if "tag" in video:
                video["tag"] = _tags(video["tag"])
            videos.append(video)
        return writer.render(self.template, videos=videos)


class GoogleImageExtension:
    name = "google_image"
    prefix = "image"
    namespace = IMAGE_NS
    template = "image.xml.j2"

    required_fields = ("loc",)
    max_images = 1000
    max_images_ref = "https://www.google.com/schemas/sitemap-image/1.1/sitemap-image.xsd"

    def validate(self, loc, payload):
        if len(payload.items) > self.max_images:
            raise ValidationError(
                "Too many images for a single URL. "
                f"Maximum number of images allowed per page is {self.max_images}, "
                f"got {len(payload.items)}. For more information, see {self.max_images_ref}"
            )
        for fields in payload.items:
            missing = [f for f in self.required_fields if f not in fields]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    def render(self, writer, loc, payload) -> str:
        self.validate(loc, payload)
        return writer.render(self.template, images=payload.items)


EXTENSIONS = {
    GoogleVideoExtension.name: GoogleVideoExtension(),
    GoogleImageExtension.name: GoogleImageExtension(),
}
