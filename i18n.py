# i18n.py
from flask import g, request

LOCALES = ("en", "ar")
DEFAULT_LOCALE = "en"
COOKIE_NAME = "lang"

TRANSLATIONS = {
    "ar": {
        "Greenhouse Monitor": "مراقبة البيوت المحمية",
        "Home": "الرئيسية",
        "Login": "تسجيل الدخول",
        "Logout": "تسجيل الخروج",
        "Register": "إنشاء حساب",
        "Username": "اسم المستخدم",
        "Password": "كلمة المرور",
        "Role": "الدور",
        "Farmer": "مزارع",
        "Technician": "فني",
        "Dashboard": "لوحة التحكم",
        "Welcome": "مرحبا",
        "My greenhouses": "بيوتي المحمية",
        "Add greenhouse": "إضافة بيت محمي",
        "Name": "الاسم",
        "Plant": "النبات",
        "None": "لا يوجد",
        "Sensor data": "بيانات المستشعرات",
        "Pending commands": "الأوامر المعلقة",
        "Send command": "إرسال أمر",
        "Device": "الجهاز",
        "Action": "الإجراء",
        "Analyze image": "تحليل الصورة",
        "Image analysis": "تحليل الصورة",
        "Unresolved issues": "المشاكل غير المحلولة",
        "Greenhouse": "البيت المحمي",
        "Description": "الوصف",
        "Resolve": "حل",
        "Simulate issue": "محاكاة مشكلة",
        "Debug panel": "لوحة التصحيح",
        "Back": "رجوع",
        "No data": "لا توجد بيانات",
        "Username already exists": "اسم المستخدم موجود بالفعل",
        "Invalid username or password": "اسم المستخدم أو كلمة المرور غير صحيحة",
        "Username and password required.": "اسم المستخدم وكلمة المرور مطلوبان.",
    },
}


def select_locale():
    """Pick the request locale: ?lang=, then the lang cookie, then English."""
    lang = request.args.get("lang") or request.cookies.get(COOKIE_NAME)
    return lang if lang in LOCALES else DEFAULT_LOCALE


def get_locale():
    return getattr(g, "locale", None) or select_locale()


def gettext(text, locale=None):
    locale = locale or get_locale()
    return TRANSLATIONS.get(locale, {}).get(text, text)


def init_app(app):
    @app.before_request
    def _set_locale():
        g.locale = select_locale()

    @app.after_request
    def _remember_locale(response):
        lang = request.args.get("lang")
        if lang in LOCALES:
            response.set_cookie(COOKIE_NAME, lang, samesite="Lax")
        return response

    @app.context_processor
    def _inject_gettext():
        locale = get_locale()
        return {
            "_": lambda text: gettext(text, locale),
            "locale": locale,
            "text_dir": "rtl" if locale == "ar" else "ltr",
        }
