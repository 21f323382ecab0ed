"""
Application ledger: users apply to jobs, companies review and move the status.

The (user_id, job_id) unique constraint is the authority on "one application
per user per job"; the pre-check below only exists to give the common case a
friendly message without a failed INSERT.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from jobboard.core.errors import ConflictError, NotFoundError, ValidationError
from jobboard.db.models.company import Company
from jobboard.db.models.job import Job
from jobboard.db.models.job_application import APPLICATION_STATUSES, JobApplication
from jobboard.db.models.user import User
from jobboard.db.session import commit_unique
from jobboard.services.job_service import like_pattern

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "You have already applied for this job"


def apply(db: Session, user: User, job_id: Optional[int]) -> JobApplication:
    """
    Record a pending application of `user` to `job_id`.

    Raises:
        ValidationError: job id missing
        ConflictError: user already applied to this job
        NotFoundError: job does not exist
    """
    if job_id is None:
        raise ValidationError("Job ID is required")

    existing = db.query(JobApplication).filter(
        JobApplication.user_id == user.id,
        JobApplication.job_id == job_id,
    ).first()
    if existing:
        raise ConflictError(DUPLICATE_MESSAGE)

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")

    application = JobApplication(
        user_id=user.id,
        job_id=job.id,
        company_id=job.company_id,
        status="pending",
    )
    db.add(application)
    commit_unique(db, DUPLICATE_MESSAGE)
    db.refresh(application)

    logger.info(f"Application created: id={application.id}, user_id={user.id}, job_id={job.id}")
    return application


def list_for_user(db: Session, user: User) -> List[JobApplication]:
    return (
        db.query(JobApplication)
        .options(joinedload(JobApplication.company), joinedload(JobApplication.job))
        .filter(JobApplication.user_id == user.id)
        .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
        .all()
    )


def list_for_company(
    db: Session,
    company: Company,
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[JobApplication], int]:
    """
    Paginated applications received by `company`, newest first.

    `search` matches job title, job city/state/country or applicant name,
    case-insensitively.

    Returns:
        (applications, total)
    """
    query = db.query(JobApplication).filter(JobApplication.company_id == company.id)

    if status:
        if status not in APPLICATION_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")
        query = query.filter(JobApplication.status == status)

    if search:
        pattern = like_pattern(search)
        query = (
            query.outerjoin(User, JobApplication.user_id == User.id)
            .outerjoin(Job, JobApplication.job_id == Job.id)
            .filter(
                or_(
                    Job.title.ilike(pattern, escape="\\"),
                    Job.location_city.ilike(pattern, escape="\\"),
                    Job.location_state.ilike(pattern, escape="\\"),
                    Job.location_country.ilike(pattern, escape="\\"),
                    User.name.ilike(pattern, escape="\\"),
                )
            )
        )

    total = query.count()

    applications = (
        query.options(joinedload(JobApplication.user), joinedload(JobApplication.job))
        .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    logger.debug(f"Company applications listed: company_id={company.id}, total={total}, page={page}")
    return applications, total


def change_status(
    db: Session,
    company: Company,
    application_id: Optional[int],
    status: Optional[str],
) -> JobApplication:
    """
    Set an application's status.

    Any authenticated company may do this; a caller that does not own the
    application is logged but not refused.
    """
    if application_id is None or not status:
        raise ValidationError("Application ID and status are required")
    if status not in APPLICATION_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")

    application = db.query(JobApplication).filter(JobApplication.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")

    if application.company_id != company.id:
        logger.warning(
            f"Application status changed by non-owning company: application_id={application.id}, "
            f"owner={application.company_id}, caller={company.id}"
        )

    application.status = status
    db.commit()
    db.refresh(application)

    logger.info(f"Application status changed: id={application.id}, status={status}")
    return application
