"""
Job catalog.

Every write that touches a job and a category counter happens in one
transaction: the job row and the usage_count adjustments are committed
together or not at all. Counters are adjusted with SQL-side arithmetic so two
concurrent requests cannot overwrite each other's increment.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from jobboard.core import config
from jobboard.core.errors import BadRequestError, ForbiddenError, NotFoundError, ValidationError
from jobboard.db.models.category import Category
from jobboard.db.models.company import Company
from jobboard.db.models.job import Job
from jobboard.db.models.job_application import JobApplication
from jobboard.schemas.job import JobPayload

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Required fields (title, description, location, category, jobType) are missing"
LOCATION_MESSAGE = "City, state, and country are required in location"


def like_pattern(term: str) -> str:
    """Substring LIKE pattern with %, _ and \\ escaped (use with escape='\\\\')."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _skill_matches(db: Session, pattern: str):
    """EXISTS clause that is true when any single element of Job.skills matches `pattern`."""
    if db.get_bind().dialect.name == "postgresql":
        elements = func.json_array_elements_text(Job.skills).table_valued("value").render_derived()
    else:
        elements = func.json_each(Job.skills).table_valued("value")
    return (
        select(elements.c.value)
        .where(elements.c.value.ilike(pattern, escape="\\"))
        .correlate(Job)
        .exists()
    )


def _validate_payload(payload: JobPayload) -> None:
    if not payload.title or not payload.description or payload.category is None or not payload.job_type:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    location = payload.location
    if location is None or not location.city or not location.state or not location.country:
        raise ValidationError(LOCATION_MESSAGE)


def _require_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).with_for_update().first()
    if not category:
        raise ValidationError("Category not found")
    return category


def _adjust_usage(db: Session, category_id: int, delta: int) -> None:
    query = db.query(Category).filter(Category.id == category_id)
    if delta < 0:
        # Never drive the counter below zero
        query = query.filter(Category.usage_count >= -delta)
    updated = query.update(
        {Category.usage_count: Category.usage_count + delta},
        synchronize_session=False,
    )
    if not updated:
        logger.warning(f"Category usage not adjusted: category_id={category_id}, delta={delta}")


def _apply_fields(job: Job, payload: JobPayload) -> None:
    job.title = payload.title.strip()
    job.description = payload.description
    job.location_city = payload.location.city
    job.location_state = payload.location.state
    job.location_country = payload.location.country
    job.location_pincode = payload.location.pincode
    job.salary_min = payload.salary_min
    job.salary_max = payload.salary_max
    job.job_type = payload.job_type
    job.experience_level = payload.experience_level or "entry"
    job.employment_type = payload.employment_type or "permanent"
    job.remote_option = payload.remote_option or "on-site"
    job.skills = payload.skills or []
    job.category_id = payload.category


def _get_job(db: Session, job_id: Optional[int]) -> Job:
    if job_id is None:
        raise ValidationError("Job ID is required")
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def post_job(db: Session, company: Company, payload: JobPayload) -> Job:
    """Create a visible job for `company` and count it against its category."""
    _validate_payload(payload)
    _require_category(db, payload.category)

    job = Job(company_id=company.id, visible=True)
    _apply_fields(job, payload)
    db.add(job)
    _adjust_usage(db, payload.category, +1)
    db.commit()
    db.refresh(job)

    logger.info(f"Job posted: job_id={job.id}, company_id={company.id}, category_id={job.category_id}")
    return job


def update_job(db: Session, company: Company, job_id: Optional[int], payload: JobPayload) -> Job:
    """
    Replace a job's fields. Only the owning company may do this.

    A category change moves one unit of usage from the old category to the
    new one in the same transaction.
    """
    if job_id is None:
        raise ValidationError("Job ID is required")
    _validate_payload(payload)

    job = _get_job(db, job_id)
    if job.company_id != company.id:
        logger.warning(f"Job update refused: job_id={job.id}, owner={job.company_id}, caller={company.id}")
        raise ForbiddenError("Unauthorized to update this job")

    old_category_id = job.category_id
    if payload.category != old_category_id:
        _require_category(db, payload.category)

    _apply_fields(job, payload)
    job.visible = payload.visible if payload.visible is not None else True

    if payload.category != old_category_id:
        _adjust_usage(db, old_category_id, -1)
        _adjust_usage(db, payload.category, +1)

    db.commit()
    db.refresh(job)

    logger.info(f"Job updated: job_id={job.id}, company_id={company.id}")
    return job


def delete_job(db: Session, company: Company, job_id: Optional[int]) -> None:
    """Delete an owned job that nobody has applied to."""
    job = _get_job(db, job_id)
    if job.company_id != company.id:
        logger.warning(f"Job delete refused: job_id={job.id}, owner={job.company_id}, caller={company.id}")
        raise ForbiddenError("Unauthorized to delete this job")

    application_count = db.query(func.count(JobApplication.id)).filter(
        JobApplication.job_id == job.id
    ).scalar() or 0
    if application_count > 0:
        raise BadRequestError("Cannot delete job because it has existing applications")

    category_id = job.category_id
    db.delete(job)
    _adjust_usage(db, category_id, -1)
    db.commit()

    logger.info(f"Job deleted: job_id={job_id}, company_id={company.id}")


def toggle_visibility(db: Session, company: Company, job_id: Optional[int]) -> Tuple[Job, bool]:
    """
    Flip a job's visibility.

    A non-owner gets a successful no-op unless STRICT_JOB_VISIBILITY_OWNERSHIP
    is set, in which case the request is refused like update/delete.

    Returns:
        (job, changed)
    """
    job = _get_job(db, job_id)

    if job.company_id != company.id:
        if config.STRICT_JOB_VISIBILITY_OWNERSHIP:
            raise ForbiddenError("Unauthorized to change visibility of this job")
        logger.warning(
            f"Visibility toggle by non-owner ignored: job_id={job.id}, owner={job.company_id}, caller={company.id}"
        )
        return job, False

    job.visible = not job.visible
    db.commit()
    db.refresh(job)

    logger.info(f"Job visibility toggled: job_id={job.id}, visible={job.visible}")
    return job, True


def list_public_jobs(db: Session) -> List[Job]:
    return (
        db.query(Job)
        .options(joinedload(Job.company), joinedload(Job.category))
        .filter(Job.visible.is_(True))
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )


def get_public_job(db: Session, job_id: int) -> Job:
    job = (
        db.query(Job)
        .options(joinedload(Job.company), joinedload(Job.category))
        .filter(Job.id == job_id, Job.visible.is_(True))
        .first()
    )
    if not job:
        raise NotFoundError("Job not found")
    return job


def list_company_jobs(
    db: Session,
    company_id: int,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    is_visible: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Tuple[Job, int]], int]:
    """
    Paginated jobs of one company with applicant counts.

    `search` is a case-insensitive substring match over title, skills and the
    city/state/country of the location.

    Returns:
        ([(job, applicants), ...], total)
    """
    query = db.query(Job).filter(Job.company_id == company_id)

    if search:
        pattern = like_pattern(search)
        query = query.filter(
            or_(
                Job.title.ilike(pattern, escape="\\"),
                _skill_matches(db, pattern),
                Job.location_city.ilike(pattern, escape="\\"),
                Job.location_state.ilike(pattern, escape="\\"),
                Job.location_country.ilike(pattern, escape="\\"),
            )
        )

    if category_id is not None:
        query = query.filter(Job.category_id == category_id)

    if is_visible is not None:
        query = query.filter(Job.visible.is_(is_visible))

    total = query.count()

    applicant_counts = (
        db.query(JobApplication.job_id, func.count(JobApplication.id).label("applicants"))
        .group_by(JobApplication.job_id)
        .subquery()
    )

    rows = (
        query.outerjoin(applicant_counts, applicant_counts.c.job_id == Job.id)
        .add_columns(func.coalesce(applicant_counts.c.applicants, 0))
        .options(joinedload(Job.category))
        .order_by(Job.created_at.desc(), Job.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    logger.debug(f"Company jobs listed: company_id={company_id}, total={total}, page={page}")
    return [(job, int(applicants)) for job, applicants in rows], total
