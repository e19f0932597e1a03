from __future__ import annotations

from sqlalchemy.orm import Session

from .core.database import SessionLocal
from .models import User
from .services.category_service import CategoryService


def seed_defaults(db: Session) -> User:
    """Demo user plus the shared default categories. Safe to run repeatedly."""
    # 기본 사용자(데모)
    user = db.query(User).filter_by(email="demo@example.com").first()
    if not user:
        user = User(email="demo@example.com", display_name="Demo", is_active=True)
        db.add(user)
        db.flush()

    # 공용 기본 카테고리 (user_id NULL)
    CategoryService(db).ensure_default_categories()
    return user


def seed() -> None:
    db: Session = SessionLocal()
    try:
        seed_defaults(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
