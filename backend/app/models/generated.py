from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, Text, func, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Resources(Base):
    __tablename__ = 'resources'

    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False, index=True)
    location = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    status = Column(
        Enum('available', 'in-use', 'out-of-service', name='resource_status'),
        nullable=False,
        server_default=text("'available'"),
    )
    picture = Column(Text, nullable=False, server_default=text("'default-resource.png'"))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'), onupdate=func.current_timestamp())

    bookings = relationship('Bookings', back_populates='resource', passive_deletes=True)


class BookingSettings(Base):
    __tablename__ = 'booking_settings'

    id = Column(Integer, primary_key=True)
    settings_key = Column(Text, nullable=False, unique=True, server_default=text("'system_settings'"))
    resource_types = Column(Text, nullable=False, server_default=text("'[]'"))
    daily_limit = Column(Integer, nullable=False, server_default=text('2'))
    weekly_limit = Column(Integer, nullable=False, server_default=text('4'))
    advance_booking_limit = Column(Integer, nullable=False, server_default=text('1'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'), onupdate=func.current_timestamp())


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        # At most one active booking per resource/date/slot
        Index(
            'uq_bookings_resource_slot_active',
            'resource_id', 'date', 'slot',
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
        # One resource per time window per user
        Index(
            'uq_bookings_user_slot_active',
            'user_id', 'date', 'slot',
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
        Index('ix_bookings_user_resource_date_status', 'user_id', 'resource_id', 'date', 'status'),
    )

    user_id = Column(Text, nullable=False)
    resource_id = Column(ForeignKey('resources.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    slot = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'active'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(
        Text,
        nullable=False,
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=func.current_timestamp(),
    )
    id = Column(Integer, primary_key=True)

    resource = relationship('Resources', back_populates='bookings')
