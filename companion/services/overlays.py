from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from companion.db.models.content import AppContent
from companion.db.schemas.content import OverlayContent
from companion.utils.logging import get_logger

logger = get_logger()

DEFAULT_CONTENT: dict[str, OverlayContent] = {
    "fajr": OverlayContent(
        en="\n".join([
            "The primary and most emphasized voluntary prayer is the Sunnah of Fajr, also known as the Ratibah (confirmed sunnah) or the Raghībah of Fajr.",
            "Type: Two Rak'ahs (cycles of prayer).",
            "Ruling: It is the most emphasized of all the confirmed sunnah prayers (Al-Sunan al-Rawātib). The Prophet (PBUH) never left them, whether traveling or resident.",
            "Time: They are performed after the true dawn appears (i.e., after the Fajr Adhan) and before the obligatory Fajr prayer is established (Iqamah).",
            "Virtue: The Prophet (PBUH) said: \"The two Rak'ahs before the Fajr prayer are better than the world and all that it contains.\" (Narrated by Muslim).",
            "Recommended Action: It is a Sunnah to make them short and light, and to recite Surah Al-Kafirun in the first Rak'ah and Surah Al-Ikhlas in the second, or similar short surahs.",
            "Optional Action: It is also a Sunnah to lie down (Idtiba') briefly on one's right side after performing these two Sunnah Rak'ahs, provided they were prayed at home.",
        ]),
        ar="\n".join([
            "النافلة الوحيدة المؤكدة قبل صلاة الفجر هي ركعتا سنة الفجر، وتُسمى أيضًا الراتبة القبلية لصلاة الفجر أو رغيبة الفجر.",
            "الحكم: هي آكد السنن الرواتب وأفضلها، وسنة مؤكدة باتفاق الجمهور.",
            "الوقت: تُصلى بعد دخول وقت الفجر الصادق (الأذان الثاني) وقبل إقامة صلاة الفجر.",
            "العدد: ركعتان خفيفتان.",
            "الفضل: قال عنها النبي صلى الله عليه وسلم: \"ركعتا الفجر خير من الدنيا وما فيها\" (رواه مسلم).",
            "الاضطجاع: يُسنُّ الاضطجاع بعد ركعتي الفجر على الشق الأيمن لمن صلاهما في بيته، وهذا مذهب الشافعية والحنابلة.",
        ]),
    ),
    "sunrise": OverlayContent(
        en="\n".join([
            "Sunrise marks the end of the Fajr time and the moment the sun appears above the horizon.",
            "Prohibition: It is discouraged to pray at the exact time of sunrise.",
            "Ishraq: Two short Rak'ahs prayed after the sun rises sufficiently (about 10–20 minutes). Many scholars consider it part of the Duha prayer.",
            "Duha Time: Begins after the sun has risen and extends until shortly before Dhuhr (zenith).",
            "Note: Avoid praying during the exact sunrise and at true zenith (midday) when the sun is at its highest.",
        ]),
        ar="\n".join([
            "وقت الشروق هو حين تظهر الشمس فوق الأفق وينتهي به وقت الفجر.",
            "النهي: يُكره أداء الصلاة في وقت الشروق نفسه.",
            "الإشراق: ركعتان خفيفتان بعد ارتفاع الشمس قدر رمح (قرابة 10–20 دقيقة)، ويُعدّها كثير من العلماء من صلاة الضحى.",
            "وقت الضحى: يبدأ بعد ارتفاع الشمس وينتهي قبيل الزوال.",
            "تنبيه: يُنهى عن الصلاة وقت الشروق ووقت الزوال عندما تكون الشمس في كبد السماء.",
        ]),
    ),
    "dhuhr": OverlayContent(
        en="\n".join([
            "Dhuhr is the midday obligatory prayer performed after the sun passes its zenith.",
            "Time Window: Starts just after zenith and extends until Asr time begins.",
            "Virtue: Dhuhr is one of the five daily prayers and holds great merit when prayed at its earliest time.",
            "Congregation: Praying in congregation (Jama’ah) is highly encouraged for men.",
            "Note: Avoid praying exactly at true zenith; the time opens moments after the sun tilts westward.",
        ]),
        ar="\n".join([
            "صلاة الظهر هي الصلاة المفروضة في منتصف النهار بعد زوال الشمس عن كبد السماء.",
            "وقت الصلاة: يبدأ بعد الزوال مباشرةً ويمتد حتى دخول وقت العصر.",
            "الفضل: الظهر من الصلوات الخمس، ويُستحب أداؤها في أول وقتها لمن استطاع.",
            "الجماعة: يُستحب أداء الصلاة جماعةً للرجال.",
            "تنبيه: يُنهى عن الصلاة وقت الزوال الدقيق، ويبدأ وقت الظهر بعد ميل الشمس قليلًا نحو الغرب.",
        ]),
    ),
    "asr": OverlayContent(
        en="\n".join([
            "Asr is the afternoon obligatory prayer prayed when shadows lengthen well after midday.",
            "Time Window: Begins when an object's shadow equals its length (Hanafi: twice its length) and ends at Maghrib.",
            "Virtue: Guarding Asr in its time is strongly emphasized; delaying without excuse is discouraged.",
            "Congregation: Praying in congregation is encouraged; avoid delaying close to sunset.",
            "Note: Refrain from praying right at sunset; Maghrib starts immediately after.",
        ]),
        ar="\n".join([
            "صلاة العصر هي الصلاة المفروضة في وقت ما بعد الزوال حين يطول الظل.",
            "وقت الصلاة: يبدأ عندما يصبح طول ظل الشيء مساوياً لطوله (وعند الحنفية: ضعف طوله) وينتهي بدخول وقت المغرب.",
            "الفضل: المحافظة على صلاة العصر في وقتها مؤكدة؛ وتأخيرها بلا عذر مكروه.",
            "الجماعة: يُستحب أداؤها جماعةً؛ ويُكره تأخيرها إلى قُبيل الغروب.",
            "تنبيه: يُنهى عن الصلاة عند الغروب؛ ويبدأ وقت المغرب مباشرة بعده.",
        ]),
    ),
    "maghrib": OverlayContent(
        en="\n".join([
            "Maghrib is the sunset obligatory prayer performed immediately after the sun fully sets.",
            "Time Window: Starts at sunset and extends until Isha time begins.",
            "Virtue: Hastening Maghrib at its time is Sunnah; avoid unnecessary delays.",
            "Congregation: Praying in congregation is encouraged; break the fast before or after with dates and water.",
            "Note: Maghrib consists of three obligatory rak'ahs followed by Sunnah prayers.",
        ]),
        ar="\n".join([
            "صلاة المغرب هي الصلاة المفروضة بعد غروب الشمس مباشرةً.",
            "وقت الصلاة: يبدأ عند الغروب ويمتد حتى دخول وقت العشاء.",
            "الفضل: يُستحب تعجيل صلاة المغرب في وقتها وعدم التأخير بلا حاجة.",
            "الجماعة: يُستحب أداؤها جماعةً؛ ويُسن الإفطار على تمر أو ماء قبل أو بعد الصلاة بحسب الحال.",
            "تنبيه: صلاة المغرب ثلاث ركعات مفروضة، تُتبع بسنةٍ راتبة.",
        ]),
    ),
    "isha": OverlayContent(
        en="\n".join([
            "Isha is the night obligatory prayer performed after twilight disappears.",
            "Time Window: Begins after Maghrib and lasts until Fajr; praying earlier in the night is recommended.",
            "Virtue: Delaying Isha slightly is permissible; keep balance and avoid excessive delay.",
            "Congregation: Praying Isha in congregation carries great reward, completing daily obligatory prayers.",
            "Note: Isha consists of four obligatory rak'ahs, followed by Sunnah and Witr optionally.",
        ]),
        ar="\n".join([
            "صلاة العشاء هي الصلاة المفروضة بعد زوال الشفق.",
            "وقت الصلاة: يبدأ بعد المغرب ويمتد إلى الفجر؛ ويُستحب أداؤها في أول الليل مع جواز التأخير بلا مشقة.",
            "الفضل: يجوز تأخير العشاء قليلاً مع مراعاة الاعتدال وعدم الإفراط في التأخير.",
            "الجماعة: أداء صلاة العشاء جماعةً ذو أجرٍ عظيم، وهي ختام الصلوات المفروضة اليومية.",
            "تنبيه: صلاة العشاء أربع ركعات مفروضة، تُتبع بسنةٍ ووترٍ لمن شاء.",
        ]),
    ),
}

PRAYERS = tuple(DEFAULT_CONTENT)


class OverlayContentService:
    """Per-prayer overlay text from ``app_content``, with built-in defaults."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get(self, prayer: str) -> OverlayContent:
        if prayer not in DEFAULT_CONTENT:
            raise ValueError(f"Unknown prayer: {prayer}")
        defaults = DEFAULT_CONTENT[prayer]

        try:
            async with self._session_factory() as session:
                row = await session.get(AppContent, f"{prayer}_overlay")
        except SQLAlchemyError as exc:
            logger.warning(f"Failed to load {prayer} overlay content: {exc}")
            return defaults

        if row is None:
            return defaults
        return OverlayContent(
            en=row.en if isinstance(row.en, str) else defaults.en,
            ar=row.ar if isinstance(row.ar, str) else defaults.ar,
            updatedAt=row.updated_at,
        )
