class HandoffError(Exception):
    """핸드오프 예외의 기본 클래스"""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class ParseError(HandoffError):
    """파싱 또는 정규화 실패 시 발생"""

    def __init__(self, field: str, message: str) -> None:
        super().__init__("TX_PARSE_001", f"{field}: {message}")


class PatientNotFoundError(HandoffError):
    """환자 조회 실패 시 발생"""

    def __init__(self, patient_id: str) -> None:
        super().__init__("PATIENT_NOT_FOUND", f"환자 없음: {patient_id}")
        self.patient_id = patient_id


class RequiredFieldError(HandoffError):
    """필수 입력 누락 시 발생"""

    def __init__(self, fields: list[str]) -> None:
        super().__init__("FORM_REQUIRED_001", "Please fill in all required fields")
        self.fields = fields


class HandoffClosedError(HandoffError):
    """종료된 교대 기록에 항목 추가 시 발생"""

    def __init__(self, handoff_id: str) -> None:
        super().__init__("HANDOFF_CLOSED", f"종료된 핸드오프: {handoff_id}")
        self.handoff_id = handoff_id
