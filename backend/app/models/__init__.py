from .generated import Base, BookingSettings, Bookings, Resources, metadata

__all__ = ["Base", "metadata", "Resources", "BookingSettings", "Bookings"]
