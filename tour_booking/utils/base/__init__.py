from tour_booking.utils.base.enums import BaseEnum, Difficulty, Role

__all__ = ["BaseEnum", "Difficulty", "Role"]
