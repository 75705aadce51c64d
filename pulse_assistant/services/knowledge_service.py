"""
Per-language knowledge base for the assistant: intents, greetings, suggestions.

Content is defined once in the tables below and frozen into a
``KnowledgeBase`` the first time a language is requested.
"""

from functools import lru_cache
from typing import Dict, List, Tuple

from loguru import logger

from pulse_assistant.models.schemas import (
    Action,
    Intent,
    KnowledgeBase,
    ResponseTemplate,
    Suggestion,
    SuggestionSets,
)


class UnsupportedLanguageError(ValueError):
    def __init__(self, language: str):
        super().__init__(f"Unsupported language: {language!r}")
        self.language = language


# ─────────────────────────────────────────────────────────
#  MATCH PATTERNS (shared, users may write in either language)
# ─────────────────────────────────────────────────────────

_PATTERNS: Dict[str, Tuple[str, ...]] = {
    'greeting': ('hello', 'hey', 'good morning', 'good evening', 'مرحبا', 'مرحباً', 'سلام', 'أهلا'),
    'donation': ('donate', 'donation', 'contribute', 'تبرع', 'تبرعات'),
    'shopping': ('product', 'store', 'shop', 'buy', 'منتج', 'متجر', 'تسوق'),
    'payment': ('payment', 'pay', 'checkout', 'credit card', 'دفع', 'شراء'),
    'transparency': ('transparency', 'track', 'blockchain', 'شفافية', 'تتبع'),
    'orders': ('order', 'shipping', 'delivery', 'طلب', 'شحن'),
    'about': ('about', 'platform', 'info', 'who are you', 'عن المنصة', 'معلومات', 'من أنتم'),
    'support': ('support', 'contact', 'assistance', 'دعم', 'تواصل'),
    'help': ('help', 'what can you do', 'مساعدة', 'ساعدني'),
}

_ACTION_ICONS = {
    'navigate_donate': 'heart',
    'navigate_store': 'shopping-bag',
    'track_donations': 'bar-chart',
    'platform_tour': 'compass',
    'navigate_support': 'phone',
    'navigate_orders': 'package',
    'navigate_about': 'info',
}


# ─────────────────────────────────────────────────────────
#  LANGUAGE CONTENT
#  templates: (text, base_confidence, [action tokens])
# ─────────────────────────────────────────────────────────

_CONTENT = {
    'en': {
        'greetings': [
            "Welcome! I'm your smart assistant at Palestine Pulse 🇵🇸",
            "Hello and welcome to Palestine Pulse! I'm here to help you. 🇵🇸",
            "Welcome to Palestine Pulse! Every purchase here becomes a transparent donation. 🇵🇸",
        ],
        'suggestion_prompt': "How can I help you today?",
        'returning_prompt': "Welcome back! Want to pick up where you left off?",
        'followup_prompt': "You can also:",
        'clarification': "Thank you for your question! I can help with donations, the store, order tracking and how our transparency works. Could you tell me a bit more? 🌟",
        'default_acknowledgement': "On it! Taking you there now.",
        'action_labels': {
            'navigate_donate': "Donate now",
            'navigate_store': "Visit the store",
            'track_donations': "Track donations",
            'platform_tour': "Take a platform tour",
            'navigate_support': "Contact support",
            'navigate_orders': "My orders",
            'navigate_about': "About us",
        },
        'acknowledgements': {
            'navigate_donate': "Opening the donation page. Thank you for standing with Palestine! 💝",
            'navigate_store': "Taking you to the store. Every purchase supports the cause! 🛍️",
            'track_donations': "Opening donation tracking, where you can follow every contribution. 📊",
            'platform_tour': "Let's take a quick tour of the platform! I'll walk you through the store, donations and transparency reports. 🧭",
            'navigate_support': "Connecting you with our support team, available 24/7. 📞",
            'navigate_orders': "Opening your orders. 📦",
            'navigate_about': "Here's more about Palestine Pulse and our mission. 🏛️",
        },
        'suggestions': {
            'first_time': [
                ("How can I donate?", 'navigate_donate', 'donation'),
                ("What products are available?", 'navigate_store', 'shopping'),
                ("How does transparency work?", 'track_donations', 'transparency'),
                ("About the platform", 'platform_tour', 'about'),
            ],
            'returning': [
                ("Track my donations", 'track_donations', 'transparency'),
                ("Browse the store", 'navigate_store', 'shopping'),
                ("Check my orders", 'navigate_orders', 'orders'),
                ("Contact support", 'navigate_support', 'support'),
            ],
        },
        'intents': {
            'greeting': [
                ("Hello! 👋 How can I help you today? I can tell you about donations, our store, or how we keep everything transparent.", 0.9, []),
                ("Hi there! Welcome to Palestine Pulse. What would you like to know?", 0.9, []),
            ],
            'donation': [
                ("You can donate easily through our direct donation page! We guarantee 100% of your donation reaches beneficiaries with complete transparency. 💝", 0.95, ['navigate_donate']),
                ("You can donate directly through the donation page. Choose the amount and cause you want to support (education, families, housing, healthcare). All donations are encrypted, secure, and fully trackable.", 0.95, ['navigate_donate', 'track_donations']),
            ],
            'shopping': [
                ("We have an amazing collection of authentic Palestinian heritage products: handcrafted pottery, traditional embroidery, and natural food products. 🏺", 0.9, ['navigate_store']),
                ("You can browse the store and choose products that suit you. When purchasing, the amount automatically converts to donations for the Palestinian cause.", 0.9, ['navigate_store']),
            ],
            'payment': [
                ("We accept credit cards, PayPal, and mobile wallets. All transactions are secure and encrypted. You can also choose direct donation.", 0.9, ['navigate_store', 'navigate_donate']),
            ],
            'transparency': [
                ("Transparency is the foundation of our work! We provide live tracking of all donations and supported projects with detailed reports and real field photos. 📊", 0.92, ['track_donations']),
                ("We use blockchain technology to ensure complete transparency. 75% goes to direct aid, 20% to education and healthcare, and 5% to platform operations.", 0.92, ['track_donations']),
            ],
            'orders': [
                ("You can follow every order from your account page, including its status and delivery updates. 📦", 0.88, ['navigate_orders']),
            ],
            'about': [
                ("Palestine Pulse is a digital resistance platform that converts every purchase into transparent donations supporting the Palestinian cause. 🏛️", 0.9, ['platform_tour', 'navigate_about']),
            ],
            'support': [
                ("Our support team is available 24/7! You can contact us via email or phone for assistance. 📞", 0.88, ['navigate_support']),
            ],
        },
    },
    'ar': {
        'greetings': [
            "أهلاً وسهلاً! أنا مساعدك الذكي في نبض فلسطين 🇵🇸",
            "مرحباً بك في نبض فلسطين! أنا هنا لمساعدتك. 🇵🇸",
            "أهلاً بك في نبض فلسطين! كل عملية شراء هنا تتحول إلى تبرع شفاف. 🇵🇸",
        ],
        'suggestion_prompt': "كيف يمكنني مساعدتك اليوم؟",
        'returning_prompt': "أهلاً بعودتك! هل تود المتابعة من حيث توقفت؟",
        'followup_prompt': "يمكنك أيضاً:",
        'clarification': "شكراً لك على سؤالك! يمكنني مساعدتك في التبرعات والمتجر ومتابعة الطلبات وكيفية عمل الشفافية. هل يمكنك توضيح سؤالك أكثر؟ 🌟",
        'default_acknowledgement': "حسناً! سأنقلك إلى هناك الآن.",
        'action_labels': {
            'navigate_donate': "تبرع الآن",
            'navigate_store': "زيارة المتجر",
            'track_donations': "تتبع التبرعات",
            'platform_tour': "جولة في المنصة",
            'navigate_support': "تواصل مع الدعم",
            'navigate_orders': "طلباتي",
            'navigate_about': "من نحن",
        },
        'acknowledgements': {
            'navigate_donate': "جارٍ فتح صفحة التبرع. شكراً لوقوفك مع فلسطين! 💝",
            'navigate_store': "سأنقلك إلى المتجر. كل عملية شراء تدعم القضية! 🛍️",
            'track_donations': "جارٍ فتح صفحة تتبع التبرعات حيث يمكنك متابعة كل مساهمة. 📊",
            'platform_tour': "لنبدأ جولة سريعة في المنصة! سأعرفك على المتجر والتبرعات وتقارير الشفافية. 🧭",
            'navigate_support': "سأوصلك بفريق الدعم المتاح على مدار الساعة. 📞",
            'navigate_orders': "جارٍ فتح طلباتك. 📦",
            'navigate_about': "إليك المزيد عن نبض فلسطين ورسالتنا. 🏛️",
        },
        'suggestions': {
            'first_time': [
                ("كيف يمكنني التبرع؟", 'navigate_donate', 'donation'),
                ("ما هي المنتجات المتاحة؟", 'navigate_store', 'shopping'),
                ("كيف تعمل الشفافية؟", 'track_donations', 'transparency'),
                ("معلومات عن المنصة", 'platform_tour', 'about'),
            ],
            'returning': [
                ("تتبع تبرعاتي", 'track_donations', 'transparency'),
                ("تصفح المتجر", 'navigate_store', 'shopping'),
                ("متابعة طلباتي", 'navigate_orders', 'orders'),
                ("التواصل مع الدعم", 'navigate_support', 'support'),
            ],
        },
        'intents': {
            'greeting': [
                ("مرحباً! 👋 كيف يمكنني مساعدتك اليوم؟ يمكنني إخبارك عن التبرعات أو المتجر أو كيف نضمن الشفافية.", 0.9, []),
                ("أهلاً بك في نبض فلسطين! ماذا تود أن تعرف؟", 0.9, []),
            ],
            'donation': [
                ("يمكنك التبرع بسهولة من خلال صفحة التبرع المباشر! نحن نضمن وصول 100% من تبرعك للمستفيدين مع شفافية كاملة. 💝", 0.95, ['navigate_donate']),
                ("يمكنك التبرع مباشرة من خلال صفحة التبرع. اختر المبلغ والسبب الذي تريد دعمه (التعليم، العائلات، الإسكان، الرعاية الصحية). جميع التبرعات مشفرة وآمنة ويمكن تتبعها بالكامل.", 0.95, ['navigate_donate', 'track_donations']),
            ],
            'shopping': [
                ("لدينا مجموعة رائعة من المنتجات التراثية الفلسطينية الأصيلة: الخزفيات المصنوعة يدوياً، التطريز التراثي، والمنتجات الغذائية الطبيعية. 🏺", 0.9, ['navigate_store']),
                ("يمكنك تصفح المتجر واختيار المنتجات التي تناسبك. عند الشراء، سيتم تحويل المبلغ تلقائياً إلى تبرع للقضية الفلسطينية.", 0.9, ['navigate_store']),
            ],
            'payment': [
                ("نقبل الدفع بالبطاقات الائتمانية، PayPal، والمحافظ الإلكترونية. جميع المعاملات آمنة ومشفرة. يمكنك أيضاً اختيار التبرع المباشر.", 0.9, ['navigate_store', 'navigate_donate']),
            ],
            'transparency': [
                ("الشفافية هي أساس عملنا! نعرض تتبع مباشر لجميع التبرعات والمشاريع المدعومة مع تقارير مفصلة وصور حقيقية من الميدان. 📊", 0.92, ['track_donations']),
                ("نستخدم تقنية البلوك تشين لضمان شفافية كاملة. 75% يذهب للمساعدات المباشرة، 20% للتعليم والصحة، و5% لتشغيل المنصة.", 0.92, ['track_donations']),
            ],
            'orders': [
                ("يمكنك متابعة كل طلب من صفحة حسابك، بما في ذلك حالته وتحديثات التوصيل. 📦", 0.88, ['navigate_orders']),
            ],
            'about': [
                ("نبض فلسطين هي منصة مقاومة رقمية تحول كل عملية شراء إلى تبرع شفاف لدعم القضية الفلسطينية. 🏛️", 0.9, ['platform_tour', 'navigate_about']),
            ],
            'support': [
                ("فريق الدعم متاح على مدار الساعة! يمكنك التواصل معنا عبر الإيميل أو الهاتف للحصول على المساعدة. 📞", 0.88, ['navigate_support']),
            ],
        },
    },
}


# ─────────────────────────────────────────────────────────
#  BUILDERS
# ─────────────────────────────────────────────────────────

def _action(token: str, labels: Dict[str, str]) -> Action:
    return Action(label=labels[token], token=token, icon_hint=_ACTION_ICONS.get(token))


def _suggestions(rows: List[tuple]) -> Tuple[Suggestion, ...]:
    return tuple(
        Suggestion(label=label, action_token=token, related_intent=intent)
        for label, token, intent in rows
    )


def _intents(content: dict) -> Tuple[Intent, ...]:
    labels = content['action_labels']
    templates = dict(content['intents'])
    # "help" always answers with the generic clarification text.
    templates['help'] = [(content['clarification'], 0.6, [])]

    intents = []
    for name, patterns in _PATTERNS.items():
        intents.append(Intent(
            name=name,
            match_patterns=tuple(p.lower() for p in patterns),
            response_templates=tuple(
                ResponseTemplate(
                    text=text,
                    base_confidence=confidence,
                    actions=tuple(_action(t, labels) for t in tokens),
                )
                for text, confidence, tokens in templates[name]
            ),
        ))
    return tuple(intents)


def supported_languages() -> Tuple[str, ...]:
    return tuple(_CONTENT)


@lru_cache(maxsize=None)
def load_language(language: str) -> KnowledgeBase:
    """Build (once) and return the frozen knowledge base for ``language``."""
    content = _CONTENT.get(language)
    if content is None:
        raise UnsupportedLanguageError(language)

    kb = KnowledgeBase(
        language=language,
        greetings=tuple(content['greetings']),
        intents=_intents(content),
        suggestions=SuggestionSets(
            first_time=_suggestions(content['suggestions']['first_time']),
            returning=_suggestions(content['suggestions']['returning']),
        ),
        clarification=content['clarification'],
        suggestion_prompt=content['suggestion_prompt'],
        returning_prompt=content['returning_prompt'],
        followup_prompt=content['followup_prompt'],
        default_acknowledgement=content['default_acknowledgement'],
        acknowledgements=tuple(content['acknowledgements'].items()),
        action_labels=tuple(content['action_labels'].items()),
    )
    logger.info(f"Knowledge base loaded: language={language} intents={len(kb.intents)}")
    return kb
