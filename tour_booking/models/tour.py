from mongoengine import (
    BooleanField,
    DateTimeField,
    FloatField,
    IntField,
    ListField,
    StringField,
    ValidationError,
    queryset_manager,
)

from tour_booking.models.base import BaseDocument
from tour_booking.utils.base import Difficulty


class Tour(BaseDocument):
    """Tour document.

    Fields:
    - name (str, unique): 10-40 characters
    - duration (int): days; output also carries duration_weeks
    - max_group_size (int)
    - difficulty (str): easy/medium/difficult
    - ratings_average (float 1-5) / ratings_quantity (int)
    - price (float) / price_discount (float|None): discount must stay below price
    - summary/description/image_cover/images: presentation
    - start_dates (list[datetime])
    - secret_tour (bool): hidden from `Tour.objects`
    """
    name = StringField(required=True, null=False, unique=True, min_length=10, max_length=40)
    duration = IntField(required=True, null=False, min_value=1)
    max_group_size = IntField(required=True, null=False, min_value=1)
    difficulty = StringField(required=True, null=False, choices=Difficulty.choices())
    ratings_average = FloatField(required=True, null=False, default=4.5, min_value=1, max_value=5)
    ratings_quantity = IntField(required=True, null=False, default=0, min_value=0)
    price = FloatField(required=True, null=False, min_value=0)
    price_discount = FloatField(required=False, null=True, min_value=0)
    summary = StringField(required=True, null=False)
    description = StringField(required=False, null=True)
    image_cover = StringField(required=True, null=False)
    images = ListField(StringField(), default=list)
    start_dates = ListField(DateTimeField(), default=list)
    secret_tour = BooleanField(required=True, null=False, default=False)

    meta = {
        "collection": "tours",
        "indexes": [
            {"fields": ["name"], "unique": True},
            {"fields": ["price", "ratings_average"]},
        ],
    }

    @queryset_manager
    def objects(doc_cls, queryset):
        return queryset.filter(secret_tour__ne=True)

    @queryset_manager
    def all_tours(doc_cls, queryset):
        return queryset

    @property
    def duration_weeks(self) -> float | None:
        if self.duration is None:
            return None
        return self.duration / 7

    def clean(self):
        if self.name:
            self.name = self.name.strip()
        if self.summary:
            self.summary = self.summary.strip()

    def validate(self, clean=True):
        super().validate(clean)
        if self.price is not None and self.price <= 0:
            message = "A tour price must be positive"
            raise ValidationError(
                message,
                field_name="price",
                errors={"price": ValidationError(message, field_name="price")},
            )
        if self.price_discount is not None and self.price is not None and self.price_discount >= self.price:
            message = f"Discount price ({self.price_discount}) should be below regular price"
            raise ValidationError(
                message,
                field_name="price_discount",
                errors={"price_discount": ValidationError(message, field_name="price_discount")},
            )

    def to_output(self, fields=None, exclude=None):
        output = super().to_output(fields, exclude)
        if not fields or "duration" in fields:
            output["duration_weeks"] = self.duration_weeks
        return output
