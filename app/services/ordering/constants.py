"""Anchor vocabulary for order text extraction."""
import re

# Any of these anywhere in the text selects the template layout
TEMPLATE_MARKERS = [
    "예약 상세정보",
    "네이버 플레이스",
    "예약자입력정보",
    "네이버 예약",
    "NAVER 예약",
    "reservation details",
]

# Section headers (exact line, or anchor followed by a tab)
MENU_SECTION_ANCHORS = ["메뉴", "예약내역", "menu", "items"]
CUSTOMER_SECTION_ANCHORS = ["예약자입력정보", "customer information"]
PAYMENT_SECTION_ANCHORS = ["결제정보", "결제/환불정보", "payment information"]
DONE_SECTION_ANCHORS = ["진행이력", "직원메모", "staff memo"]
DONE_SUBSTRINGS = ["Copyright"]

# Header rows compared after digits, dashes, dots, colons and spaces are removed
HEADER_NOISE_WORDS = {
    "예약유형",
    "이메일",
    "상품",
    "인원",
    "유입경로",
    "NPay주문번호",
    "결제수단",
    "원결제금액",
    "예약확정안내",
    "파트너센터",
    "확정",
    "신청",
    "완료",
}

# Boilerplate sentences; any line containing one is noise
NOISE_SUBSTRINGS = [
    "주문해주셔서 감사합니다",
    "자세히 보기",
    "스마트플레이스",
    "발신전용입니다",
    "고객센터",
    "<!--",
]

# Disclaimer that follows the delivery address in the template
ADDRESS_DISCLAIMERS = ["정보 오기입", "사고는 배상하지", "not liable"]

# Template field anchors (line prefix)
NAME_ANCHORS = ["예약자명", "예약자", "주문자", "reservation name", "customer name"]
CONTACT_ANCHORS = ["전화번호", "연락처", "contact", "phone"]
FULFILLMENT_ANCHORS = ["배달 및 픽업 선택", "pickup or delivery"]
ADDRESS_ANCHORS = ["배달 받으실 주소를 기입해주세요", "delivery address"]
SCHEDULE_ANCHORS = ["이용일시", "픽업일시", "수령일시", "scheduled at"]
VISITOR_ANCHORS = ["방문자", "수령인", "visitor", "recipient"]
REQUEST_ANCHORS = ["요청사항", "request"]
PAYMENT_STATUS_ANCHORS = ["결제상태", "payment status"]
RESERVATION_NUMBER_ANCHORS = ["예약번호", "reservation number"]
PAYMENT_AMOUNT_ANCHORS = ["결제금액", "결제액", "payment amount"]

DELIVERY_VALUES = ["배달", "delivery"]
PICKUP_VALUES = ["픽업", "pickup"]

# Loose layout anchors, matched anywhere in a line
LOOSE_NAME_PATTERN = re.compile(r"주문자|예약자명|예약자|성함|이름|고객명|\bname\b", re.IGNORECASE)
# Whole label phrase, so "Delivery address:" leaves nothing of the label behind
LOOSE_ADDRESS_PATTERN = re.compile(
    r"배달\s*주소|배송\s*주소|배송지|주소|(?:\bdelivery\s+)?\baddress\b", re.IGNORECASE
)
LOOSE_FEE_PATTERN = re.compile(r"배달팁|배달료|배달비|\bdelivery fee\b", re.IGNORECASE)
LOOSE_VISITOR_PATTERN = re.compile(r"방문자|수령인|\bvisitor\b|\brecipient\b", re.IGNORECASE)
LOOSE_SCHEDULE_PATTERN = re.compile(r"일시|날짜|이용|시간|\bdate\b|\btime\b", re.IGNORECASE)
LOOSE_REQUEST_PATTERN = re.compile(r"요청|메모|사항|\brequest\b|\bmemo\b", re.IGNORECASE)
LOOSE_STATUS_PATTERN = re.compile(r"결제상태|입금|\bpayment status\b", re.IGNORECASE)
LOOSE_AMOUNT_PATTERN = re.compile(r"결제금액|결제액|총액|합계|\btotal amount\b|\bpayment amount\b", re.IGNORECASE)
LOOSE_DELIVERY_HINTS = ["라이더", "배달요청", "배달주소"]

# Values that are really labels, never names or addresses
LABEL_WORDS = [
    "입력",
    "정보",
    "선택",
    "기입",
    "주소",
    "연락처",
    "전화번호",
    "name",
    "address",
    "delivery",
]

PHONE_PATTERN = re.compile(r"01[016789][-.\s]?\d{3,4}[-.\s]?\d{4}")

# Item recognition
DISCOUNT_KEYWORDS = ["쿠폰", "할인", "coupon", "discount"]
COUPON_KEYWORDS = ["쿠폰", "coupon"]
PRODUCT_LABELS = ["상품명", "메뉴명", "품목", "product name", "item"]
ZONE_WORDS = ["zone", "구역"]

# Status summary words that disqualify "name 2" lines
DEFAULT_STATUS_WORDS = [
    "완료",
    "확정",
    "접수",
    "취소",
    "complete",
    "confirmed",
    "received",
    "cancelled",
]

MAX_QUANTITY = 1000  # Tokens at or above this are prices or dates, not quantities
MAX_BARE_QUANTITY = 100

CHANNEL_KEYWORDS = [
    ("NAVER", ["네이버", "NAVER"]),
    ("BAND", ["밴드"]),
]
