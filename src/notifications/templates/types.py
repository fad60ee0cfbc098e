from enum import Enum


class NotificationType(Enum):
    ORDER_STATUS_UPDATE = "order_status_update"
    NEW_ORDER_AVAILABLE = "new_order_available"
    NEW_ORDER = "new_order"
    DASHBOARD_TEST = "test"
    VERIFICATION_CODE = "verification_code"
