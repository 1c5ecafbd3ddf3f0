from .profile import Profile
from .activity import Activity, ActivityCategory
from .goal import CarbonGoal, GoalType, GoalStatus
from .challenge import Challenge, ChallengeParticipant
from .badge import Badge, ProfileBadge
from .reward import Reward, RewardRedemption
from .content import Content
from .community import Community, CommunityMember

__all__ = [
    "Profile",
    "Activity",
    "ActivityCategory",
    "CarbonGoal",
    "GoalType",
    "GoalStatus",
    "Challenge",
    "ChallengeParticipant",
    "Badge",
    "ProfileBadge",
    "Reward",
    "RewardRedemption",
    "Content",
    "Community",
    "CommunityMember",
]
