from projexia.schemas.common import CamelModel, MessageResponse
from projexia.schemas.auth import (
    SignupRequest, LoginRequest, AvatarUpdateRequest, UserResponse,
    AvatarUpdateResponse, GoogleProfile,
)
from projexia.schemas.task import (
    TaskCreate, TaskUpdate, TaskResponse,
    TaskCommentCreate, CommentCreate, CommentResponse,
)
from projexia.schemas.project import (
    MemberInput, InviteRequest, MemberRoleUpdate, MemberResponse,
    ProjectCreate, ProjectUpdate, ProjectResponse,
    ChatMessageCreate, ChatMessageResponse,
)
