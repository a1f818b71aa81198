"""
Applicant stage changes shared by several endpoints.
"""
from hiretrack_app.utils.constants import PRE_INTERVIEW_STAGES, PRE_OFFER_STAGES


def move_to_stage(applicant, stage, note=None):
    """Set the stage and optionally leave a timeline note. Returns the previous stage."""
    previous = applicant.stage
    applicant.stage = stage
    if note:
        applicant.add_note(note)
    return previous


def advance_for_interview(applicant):
    """Scheduling an interview pulls early-stage applicants forward. Returns True if moved."""
    if applicant.stage not in PRE_INTERVIEW_STAGES:
        return False
    move_to_stage(
        applicant, 'interview',
        f"Automatically moved from {applicant.stage} to interview (interview scheduled)",
    )
    return True


def advance_for_offer_status(applicant, status):
    """
    Extending an offer moves pre-offer applicants to 'offer'; an accepted
    offer moves an applicant at 'offer' to 'hired'. Returns True if moved.
    """
    if status == 'extended' and applicant.stage in PRE_OFFER_STAGES:
        move_to_stage(applicant, 'offer', "Automatically moved to offer stage (offer extended)")
        return True
    if status == 'accepted' and applicant.stage == 'offer':
        move_to_stage(applicant, 'hired', "Automatically moved to hired (offer accepted)")
        return True
    return False
