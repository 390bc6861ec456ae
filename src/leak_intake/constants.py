"""Intake constants shared across the SDK.

These values are referenced by the sequencer, photo intake, pipeline and
ledger.  Several can be overridden via environment variables so that
deployments can tune request size and limits without code changes.
"""

import os

# Maximum number of photos a user can attach to one wizard run.
# Overridable via MAX_PHOTOS env var.
MAX_PHOTOS = int(os.getenv("MAX_PHOTOS", "6"))

# How many photos (from the front of the list) are sent to the relevance
# gate and to the report call.  The report cap is deliberately lower than
# MAX_PHOTOS to bound request size and latency.
RELEVANCE_PHOTO_LIMIT = int(os.getenv("RELEVANCE_PHOTO_LIMIT", "2"))
REPORT_PHOTO_LIMIT = int(os.getenv("REPORT_PHOTO_LIMIT", "3"))

# Minimum number of hazard checks the safety gate must carry.
MIN_HAZARD_CHECKS = 3

# Media types accepted by photo intake.
ACCEPTED_MEDIA_TYPES: frozenset[str] = frozenset({
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
})

# Negotiation checklist entries pack "question|red flag|rationale".
NEGOTIATION_DELIMITER = "|"

# Fixed key the lead ledger is stored under in the key/value table.
LEDGER_KEY = "leakage_leads"

# Phone numbers must match this after auto-formatting (010-XXX(X)-XXXX).
PHONE_PATTERN = r"^010-\d{3,4}-\d{4}$"

# External channel the unlock gate sends users to.
DEFAULT_CHANNEL_URL = os.getenv("CHANNEL_URL", "http://pf.kakao.com/_CWzRX")

# --- User-facing messages (Korean, shown verbatim by the client) ---
MSG_SAFETY_REQUIRED = "안전 점검 항목을 모두 확인해주세요."
MSG_SELECTION_REQUIRED = "항목을 선택해주세요."
MSG_SYMPTOMS_REQUIRED = "증상을 하나 이상 선택해주세요."
MSG_PHOTOS_REQUIRED = "정밀 분석을 위해 현장 사진 업로드가 필요합니다."
MSG_UNSUPPORTED_MEDIA = "이미지 파일만 업로드할 수 있습니다."
MSG_RELEVANCE_REJECTED = (
    "누수 현장과 관련 없는 사진이 감지되었습니다. "
    "현장을 잘 확인할 수 있는 사진으로 다시 업로드 해주세요."
)
MSG_ANALYSIS_FAILED = "분석 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
MSG_ANALYSIS_IN_PROGRESS = "분석이 진행 중입니다. 잠시만 기다려주세요."
MSG_CHANNEL_REQUIRED = "채널 추가를 먼저 진행해주세요."
MSG_CONTACT_REQUIRED = "연락처와 지역을 입력해주세요."
MSG_PHONE_FORMAT = "연락처 형식을 확인해주세요. (010-0000-0000)"
MSG_SUBMISSION_FAILED = "상담 신청 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
MSG_SUBMISSION_OK = "상담 신청이 완료되었습니다. 관리자가 확인 후 곧 연락드리겠습니다."
MSG_UNLOCKED = "채널 추가 확인이 완료되었습니다. 리포트가 공개되었습니다."

# Fixed body of the consultation notification e-mail.
NOTIFICATION_MESSAGE = "누수 블랙박스에 새로운 상담 요청이 접수되었습니다."
