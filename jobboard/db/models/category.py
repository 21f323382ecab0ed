from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from jobboard.db.base import Base


class Category(Base):
    """
    Job category.

    usage_count caches the number of jobs pointing at this category. It is only
    changed by job create/update/delete, inside the same transaction as the job
    write (see jobboard.services.job_service).
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, unique=True, index=True, nullable=False)
    usage_count = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("usage_count >= 0", name="ck_categories_usage_count_non_negative"),
    )

    def __repr__(self):
        return f"<Category(id={self.id}, type='{self.type}', usage_count={self.usage_count})>"
