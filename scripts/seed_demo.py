#!/usr/bin/env python3
"""
Seed script to create demo users and a sample reservation
"""

import asyncio
import uuid
from datetime import date, timedelta

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from sucurries.database import SessionLocal, engine, Base
    from sucurries.models.user import User, UserRole
    from sucurries.booking.service import ReservationService
    from sucurries.schemas.reservation import ReservationCreate

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo data already exists
        from sqlalchemy import select
        result = await db.execute(
            select(User).where(User.email == "admin@sucurries.com")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo users...")

        admin_user = User(
            id=uuid.uuid4(),
            email="admin@sucurries.com",
            hashed_password=pwd_context.hash("admin12345"),
            first_name="Restaurant",
            last_name="Admin",
            role=UserRole.ADMIN,
        )
        db.add(admin_user)

        customer = User(
            id=uuid.uuid4(),
            email="jane@example.com",
            hashed_password=pwd_context.hash("customer123"),
            first_name="Jane",
            last_name="Doe",
            phone="+441234567890",
            role=UserRole.CUSTOMER,
        )
        db.add(customer)
        await db.commit()

        print("Creating sample reservation...")

        service = ReservationService(db)
        reservation = await service.create_reservation(
            ReservationCreate(
                customer_name="Jane Doe",
                customer_email="jane@example.com",
                customer_phone="+441234567890",
                date=date.today() + timedelta(days=1),
                time="19:00",
                party_size=4,
                special_requests="Window table if possible",
            ),
            user=customer,
        )

        print(f"""
Demo data created successfully!

Users:
  Admin:
    Email: admin@sucurries.com
    Password: admin12345

  Customer:
    Email: jane@example.com
    Password: customer123

Reservation: {reservation.booking_number} on {reservation.reservation_date} at {reservation.reservation_time}
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
