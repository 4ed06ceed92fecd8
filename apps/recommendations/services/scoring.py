from datetime import timedelta

from django.utils import timezone

from apps.projects.models import ProjectRequest
from apps.users.models import Profile, User

RECENCY_WINDOW = timedelta(days=7)

FREELANCER_MIN_SCORE = 10
FREELANCER_LIMIT = 5
PROJECT_MIN_SCORE = 15
PROJECT_LIMIT = 10


def _skill_set(skills):
    # blank entries are ignored, so ["  "] requires nothing
    return {str(skill).strip().lower() for skill in skills or [] if str(skill).strip()}


def calculate_skill_match(required, available):
    """
    Share of required skills the candidate has, compared case-insensitively.

    1.0 when nothing is required, 0.0 when the candidate lists no skills.
    """
    required_set = _skill_set(required)
    if not required_set:
        return 1.0

    available_set = _skill_set(available)
    if not available_set:
        return 0.0

    return len(required_set & available_set) / len(required_set)


def score_freelancer(project, freelancer, client_college=""):
    skill_score = calculate_skill_match(project.skills, freelancer.skills)
    rating_score = float(freelancer.average_rating or 0) / 5
    experience_score = min(freelancer.total_reviews or 0, 10) / 10

    college = (freelancer.college_name or "").strip()
    college_match = 1 if client_college and college and client_college == college else 0

    total = (
        skill_score * 50
        + rating_score * 20
        + experience_score * 15
        + college_match * 15
    )
    return total, {"skill_score": skill_score, "college_match": college_match}


def score_project(project, freelancer, now=None):
    now = now or timezone.now()

    skill_score = calculate_skill_match(project.skills, freelancer.skills)

    age = now - project.created_at
    window = RECENCY_WINDOW.total_seconds()
    recency_score = max(0.0, (window - age.total_seconds()) / window)

    return skill_score * 70 + recency_score * 30


class RecommendationService:
    """
    Stateless ranking of freelancers for a project and projects for a
    freelancer. Nothing is persisted.
    """

    @classmethod
    def freelancers_for_project(cls, project):
        client_profile = Profile.objects.filter(user_id=project.client_id).first()
        client_college = (client_profile.college_name or "").strip() if client_profile else ""

        candidates = (
            Profile.objects.filter(user_type=User.FREELANCER)
            .exclude(user_id=project.client_id)
            .select_related("user")
        )

        scored = []
        for freelancer in candidates:
            score, details = score_freelancer(project, freelancer, client_college)
            if score > FREELANCER_MIN_SCORE:
                scored.append((score, freelancer, details))

        scored.sort(key=lambda item: item[0], reverse=True)
        return scored[:FREELANCER_LIMIT]

    @classmethod
    def projects_for_freelancer(cls, user, now=None):
        if not user.is_authenticated:
            return []

        profile = Profile.objects.filter(user=user).first()
        if profile is None or not profile.is_freelancer:
            return []

        now = now or timezone.now()
        scored = []
        for project in ProjectRequest.objects.filter(status=ProjectRequest.OPEN):
            score = score_project(project, profile, now=now)
            if score > PROJECT_MIN_SCORE:
                scored.append((score, project))

        scored.sort(key=lambda item: item[0], reverse=True)
        return scored[:PROJECT_LIMIT]
