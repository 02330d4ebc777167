from app.schemas.base import APIModel, MessageResponse
from app.schemas.user import UserResponse, UserAdminUpdate, AssignRoleRequest
from app.schemas.auth import SignupRequest, LoginRequest, Token, VerifyOtpRequest
from app.schemas.verification import VerificationCreate, VerificationResponse, RejectRequest, ApprovalResponse
from app.schemas.records import DocumentResponse, TransactionResponse, NotificationResponse
from app.schemas.map import MapRegisterRequest, MapRegistrationResponse
from app.schemas.stats import AdminStats, SuperAdminStats, Analytics
