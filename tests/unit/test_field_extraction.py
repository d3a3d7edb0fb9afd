"""Unit tests for template and loose field extraction."""
import pytest

from app.services.ordering.classifier import classify, detect_layout
from app.services.ordering.fields import (
    LooseFieldExtractor,
    TemplateFieldExtractor,
    extractors_for,
    is_valid_address,
    is_valid_name,
    normalize_date,
    normalize_time,
)
from app.services.ordering.lines import split_lines
from app.services.ordering.models import FieldValues, FulfillmentKind, Layout


def _run(text, extractor):
    """Classify text and run one extractor over it."""
    lines = split_lines(text)
    classified = classify(lines, detect_layout(lines))
    return extractor.extract(lines, classified.tags, classified.claimed, FieldValues())


class TestNormalizers:
    """Test date and time normalization."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2026. 1. 30.(금)", "2026-01-30"),
            ("2026-02-03", "2026-02-03"),
            ("2026년 3월 9일", "2026-03-09"),
            ("2026. 2. 30.", None),
            ("내일", None),
        ],
    )
    def test_normalize_date(self, text, expected):
        """Test dates in the formats the platforms print."""
        assert normalize_date(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("오후 7:00", "19:00"),
            ("오전 12:30", "00:30"),
            ("오후 12:10", "12:10"),
            ("PM 7:05", "19:05"),
            ("7:00 PM", "19:00"),
            ("19:00", "19:00"),
            ("25:00", None),
            ("오후", None),
        ],
    )
    def test_normalize_time(self, text, expected):
        """Test 12-hour and 24-hour times."""
        assert normalize_time(text) == expected

    def test_name_and_address_validity(self):
        """Test label words are never names or addresses."""
        assert is_valid_name("홍길동")
        assert not is_valid_name("홍")
        assert not is_valid_name("고객정보 입력")
        assert not is_valid_name("김철수2")
        assert is_valid_address("서울시 마포구 월드컵로 10")
        assert not is_valid_address("배달 받으실 주소")
        assert not is_valid_address("역삼동")
        assert not is_valid_address("Delivery")


class TestTemplateFieldExtractor:
    """Test prefix-anchored template fields."""

    def test_inline_and_next_line_values(self):
        """Test values on the anchor line and on the following line."""
        text = """네이버 예약
예약번호 1234567890
예약자명
홍길동
연락처 010-1234-5678
이용일시 2026. 1. 30.(금) 오후 7:00
요청사항 문 앞에 놓아주세요
결제상태 결제완료
결제금액 12,500원"""
        values, claimed = _run(text, TemplateFieldExtractor())

        assert values.reservation_number == "1234567890"
        assert values.customer_name == "홍길동"
        assert values.contact == "010-1234-5678"
        assert values.scheduled_date == "2026-01-30"
        assert values.scheduled_time == "19:00"
        assert values.request_note == "문 앞에 놓아주세요"
        assert values.payment_status == "결제완료"
        assert values.payment_amount_text == "12,500원"
        assert values.payment_amount_line == 8
        assert claimed.owner(2) == "template_fields"
        assert claimed.owner(3) == "template_fields"

    def test_delivery_address_block_until_disclaimer(self):
        """Test the address block runs up to the disclaimer sentence."""
        text = """예약 상세정보
배달 및 픽업 선택
delivery
배달 받으실 주소를 기입해주세요
서울시 강남구 테헤란로 123
101동 202호
정보 오기입으로 인한 배달 사고는 배상하지 않습니다"""
        values, claimed = _run(text, TemplateFieldExtractor())

        assert values.fulfillment_kind == FulfillmentKind.DELIVERY
        assert values.address == "서울시 강남구 테헤란로 123 101동 202호"
        assert all(index in claimed for index in range(1, 7))

    def test_address_without_disclaimer_takes_one_line(self):
        """Test that without a disclaimer only the first address line is taken."""
        text = """예약 상세정보
배달 및 픽업 선택 배달
배달 받으실 주소를 기입해주세요
서울시 강남구 역삼동 1-1
시금치나물 2"""
        values, claimed = _run(text, TemplateFieldExtractor())

        assert values.fulfillment_kind == FulfillmentKind.DELIVERY
        assert values.address == "서울시 강남구 역삼동 1-1"
        assert 4 not in claimed

    def test_pickup_has_no_address(self):
        """Test pickup orders do not read an address."""
        text = """예약 상세정보
배달 및 픽업 선택 픽업"""
        values, _ = _run(text, TemplateFieldExtractor())

        assert values.fulfillment_kind == FulfillmentKind.PICKUP
        assert values.address is None

    def test_label_without_value_is_claimed(self):
        """Test an empty label line is consumed so no item rule sees it."""
        text = """예약 상세정보
요청사항
결제금액 9,000원"""
        values, claimed = _run(text, TemplateFieldExtractor())

        assert values.request_note is None
        assert claimed.owner(1) == "template_fields"
        assert values.payment_amount_text == "9,000원"


class TestLooseFieldExtractor:
    """Test anchors anywhere in free-form messages."""

    def test_free_form_message(self):
        """Test a typical chat-style order."""
        text = """주문자: 김철수 010-2222-3333
주소: 서울시 마포구 월드컵로 10
배달
시금치나물 2
요청사항: 맵지 않게 해주세요"""
        values, claimed = _run(text, LooseFieldExtractor())

        assert values.customer_name == "김철수"
        assert values.contact == "010-2222-3333"
        assert values.address == "서울시 마포구 월드컵로 10"
        assert values.fulfillment_kind == FulfillmentKind.DELIVERY
        assert values.request_note == "맵지 않게 해주세요"
        assert 3 not in claimed

    def test_name_on_next_line(self):
        """Test a bare name label takes the following line."""
        values, claimed = _run("이름\n박영희", LooseFieldExtractor())

        assert values.customer_name == "박영희"
        assert 0 in claimed and 1 in claimed

    def test_fee_and_amount(self):
        """Test delivery fee and payment amount lines."""
        values, _ = _run("배달비 3,000원\n총액 21,900원", LooseFieldExtractor())

        assert values.delivery_fee == 3000
        assert values.payment_amount_text == "21,900원"

    def test_delivery_hint_does_not_claim(self):
        """Test delivery hints set the kind but leave the line free."""
        values, claimed = _run("라이더님 조심히 와주세요", LooseFieldExtractor())

        assert values.fulfillment_kind == FulfillmentKind.DELIVERY
        assert 0 not in claimed

    def test_schedule_needs_a_date_or_time(self):
        """Test schedule words without a date or time are ignored."""
        values, claimed = _run("이용 감사합니다\n수령 날짜 2026-02-03 12:30", LooseFieldExtractor())

        assert values.scheduled_date == "2026-02-03"
        assert values.scheduled_time == "12:30"
        assert 0 not in claimed

    def test_fields_already_set_are_kept(self):
        """Test values from an earlier extractor are not overwritten."""
        lines = split_lines("이름: 박영희")
        classified = classify(lines, Layout.LOOSE)
        values, _ = LooseFieldExtractor().extract(
            lines, classified.tags, classified.claimed, FieldValues(customer_name="홍길동")
        )

        assert values.customer_name == "홍길동"

    def test_delivery_address_label(self):
        """Test the whole "Delivery address" label is removed from the value."""
        values, claimed = _run("Delivery address: 12 Main Street", LooseFieldExtractor())

        assert values.address == "12 Main Street"
        assert 0 in claimed

    def test_label_alone_is_not_an_address(self):
        """Test an address label without a value sets nothing."""
        values, claimed = _run("Delivery address", LooseFieldExtractor())

        assert values.address is None
        assert 0 not in claimed

    def test_product_label_is_not_a_name(self):
        """Test product-labeled lines are left to the item rules."""
        values, claimed = _run("product name: Kimchi", LooseFieldExtractor())

        assert values.customer_name is None
        assert 0 not in claimed


class TestExtractorSelection:
    """Test extractor dispatch per layout."""

    def test_extractors_for_layout(self):
        """Test template runs both extractors and loose runs one."""
        template = extractors_for(Layout.TEMPLATE)
        loose = extractors_for(Layout.LOOSE)

        assert [type(e) for e in template] == [TemplateFieldExtractor, LooseFieldExtractor]
        assert [type(e) for e in loose] == [LooseFieldExtractor]
