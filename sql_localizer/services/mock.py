import random
import re
import time
from typing import Optional, Sequence

from sql_localizer.models import GeneratedRecord
from sql_localizer.services.base import ImagePayload, with_english

# Industry-standard iGaming dictionary
INDUSTRY_DICT: dict[str, dict[str, str]] = {
    "Deposit": {"cn": "充值", "kh": "ដាក់ប្រាក់", "id": "Setoran", "vn": "Gửi tiền", "th": "ฝากเงิน", "my": "Deposit"},
    "Withdraw": {"cn": "提现", "kh": "ដកប្រាក់", "id": "Penarikan", "vn": "Rút tiền", "th": "ถอนเงิน", "my": "Pengeluaran"},
    "Spin": {"cn": "旋转", "kh": "វិល", "id": "Putar", "vn": "Quay", "th": "หมุน", "my": "Putar"},
    "Bet": {"cn": "投注", "kh": "ភ្នាល់", "id": "Taruhan", "vn": "Đặt cược", "th": "วางเดิมพัน", "my": "Pertaruhan"},
    "Balance": {"cn": "余额", "kh": "សមតុល្យ", "id": "Saldo", "vn": "Số dư", "th": "ยอดคงเหลือ", "my": "Baki"},
    "Bonus": {"cn": "奖金", "kh": "ប្រាក់រង្វាន់", "id": "Bonus", "vn": "Tiền thưởng", "th": "โบนัส", "my": "Bonus"},
    "Jackpot": {"cn": "大奖", "kh": "ជែកផត", "id": "Jackpot", "vn": "Giải độc đắc", "th": "แจ็คพอต", "my": "Jackpot"},
    "Promotion": {"cn": "优惠", "kh": "ការផ្សព្វផ្សាយ", "id": "Promosi", "vn": "Khuyến mãi", "th": "โปรโมชั่น", "my": "Promosi"},
    "Turnover": {"cn": "流水", "kh": "ចរាចរណ៍សាច់ប្រាក់", "id": "Perputaran", "vn": "Doanh thu", "th": "ยอดเทิร์นโอเวอร์", "my": "Turnover"},
    "Rebate": {"cn": "返水", "kh": "ការបង្វិលប្រាក់", "id": "Rabat", "vn": "Hoàn trả", "th": "คืนเงิน", "my": "Rebat"},
    "KYC Verification": {"cn": "实名认证", "kh": "ការផ្ទៀងផ្ទាត់អត្តសញ្ញាណ", "id": "Verifikasi KYC", "vn": "Xác minh danh tính", "th": "การยืนยันตัวตน", "my": "Pengesahan KYC"},
    "Odds": {"cn": "赔率", "kh": "ហាងឆេង", "id": "Peluang", "vn": "Tỷ lệ cược", "th": "อัตราต่อรอง", "my": "Odds"},
    "Login": {"cn": "登录", "kh": "ចូល", "id": "Masuk", "vn": "Đăng nhập", "th": "เข้าสู่ระบบ", "my": "Log Masuk"},
    "Register": {"cn": "注册", "kh": "ចុះឈ្មោះ", "id": "Daftar", "vn": "Đăng ký", "th": "ลงทะเบียน", "my": "Daftar"},
    "Confirm": {"cn": "确认", "kh": "បញ្ជាក់", "id": "Konfirmasi", "vn": "Xác nhận", "th": "ยืนยัน", "my": "Sahkan"},
    "Insufficient Balance": {"cn": "余额不足", "kh": "សមតុល្យមិនគ្រប់គ្រាន់", "id": "Saldo Tidak Cukup", "vn": "Số dư không đủ", "th": "ยอดเงินไม่เพียงพอ", "my": "Baki Tidak Mencukupi"},
    "Daily Mission": {"cn": "每日任务", "kh": "បេសកកម្មប្រចាំថ្ងៃ", "id": "Misi Harian", "vn": "Nhiệm vụ hàng ngày", "th": "ภารกิจรายวัน", "my": "Misi Harian"},
    "VIP Level": {"cn": "VIP等级", "kh": "កម្រិត VIP", "id": "Level VIP", "vn": "Cấp độ VIP", "th": "ระดับ VIP", "my": "Tahap VIP"},
    "Play Now": {"cn": "立即开始", "kh": "លេងឥឡូវនេះ", "id": "Main Sekarang", "vn": "Chơi ngay", "th": "เล่นเลย", "my": "Main Sekarang"},
    "History": {"cn": "记录", "kh": "ប្រវត្តិ", "id": "Riwayat", "vn": "Lịch sử", "th": "ประวัติ", "my": "Sejarah"},
    "Bank Card": {"cn": "银行卡", "kh": "កាតធនាគារ", "id": "Kartu Bank", "vn": "Thẻ ngân hàng", "th": "บัตรธนาคาร", "my": "Kad Bank"},
    "Stake": {"cn": "本金", "kh": "ប្រាក់ដើម", "id": "Taruhan Utama", "vn": "Tiền cược", "th": "เงินเดิมพัน", "my": "Stake"},
}

CATEGORY_MAP: dict[str, list[str]] = {
    "BANKING": ["deposit", "withdraw", "balance", "bank", "wallet", "transfer", "pay", "card"],
    "GAMES": ["spin", "play", "jackpot", "bet", "win", "slot", "dealer", "odds", "stake", "multiplier"],
    "ACCOUNT": ["login", "register", "profile", "settings", "password", "kyc", "user", "verify"],
    "PROMO": ["bonus", "promotion", "rebate", "mission", "event", "gift", "vip", "rewards", "turnover"],
    "SYSTEM": ["error", "success", "confirm", "cancel", "loading", "network", "invalid"],
}

# Canned refinements for the languages people ask about most
REFINE_VARIANTS: dict[str, list[str]] = {
    "cn": ["确 认", "确定提交", "立即执行"],
    "vn": ["Xác nhận", "Đồng ý", "Hoàn tất ngay"],
    "th": ["ยืนยันการทำรายการ", "ตกลง", "ดำเนินการต่อ"],
}

# Placeholder tag used when the dictionary has no match ("cn" text is Chinese, hence ZH)
PLACEHOLDER_TAGS = {"cn": "ZH"}


def detect_category(text: str) -> str:
    lower = text.lower()
    for category, keywords in CATEGORY_MAP.items():
        if any(k in lower for k in keywords):
            return category
    return "COMMON"


def match_term(text: str) -> Optional[str]:
    lower = text.lower()
    for term in INDUSTRY_DICT:
        if term.lower() == lower:
            return term
    for term in INDUSTRY_DICT:
        if term.lower() in lower:
            return term
    return None


class MockClient:
    """Offline stand-in for Gemini backed by a static dictionary."""

    def __init__(self, delay: float = 0.0, rng: Optional[random.Random] = None):
        self.delay = delay
        self.rng = rng or random.Random()

    def _pause(self, seconds: float):
        if seconds > 0:
            time.sleep(seconds)

    def make_code(self, text: str, category: str) -> str:
        words = re.sub(r"[^a-zA-Z0-9 ]", "", text.strip()).split(" ")
        base = "_".join(words[:2]).upper() or "ACTION"
        prefix = "GME" if category == "GAMES" else category[:3]
        return f"{prefix}_{base}_{self.rng.randint(100, 999)}"

    def generate(
        self,
        text: str,
        languages: Sequence[str],
        image: Optional[ImagePayload] = None,
    ) -> GeneratedRecord:
        self._pause(self.delay)
        text = text or ""
        category = detect_category(text)
        term = match_term(text)

        translations = {}
        for lang in with_english(languages):
            if lang == "en":
                translations[lang] = text or "Untitled Action"
            elif term and lang in INDUSTRY_DICT[term]:
                translations[lang] = INDUSTRY_DICT[term][lang]
            else:
                translations[lang] = f"[{PLACEHOLDER_TAGS.get(lang, lang.upper())}] {text}"

        return GeneratedRecord(key1=category, key2=self.make_code(text, category), translations=translations)

    def refine(self, lang: str, current_text: str, english_context: str) -> str:
        self._pause(self.delay / 2)
        pool = REFINE_VARIANTS.get(lang) or [f"{current_text} (Official)", f"{current_text} (System)"]
        return self.rng.choice(pool)
