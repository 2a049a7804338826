"""
Questionnaire Library

Static clinical questionnaires with their candidate medications and
prescription logic:

- GLP-1 weight management
- Men's erectile dysfunction
- Prescription skincare
- Hair growth

Each definition is written as a questionnaire document and goes through
questionnaire_from_dict(), so the shipped data passes the same validation
as externally supplied questionnaires. Contraindication rules quote option
labels verbatim: a rule whose value is not an option of the referenced
question could never fire and is rejected at load time.
"""

from typing import Dict, Any, List, Optional
import logging

from questionnaire_models import Questionnaire
from questionnaire_loader import questionnaire_from_dict

logger = logging.getLogger(__name__)


# ==================== GLP-1 WEIGHT MANAGEMENT ====================

GLP1_QUESTIONNAIRE_DOC: Dict[str, Any] = {
    "id": "glp1_weight_loss",
    "category": "Weight Management",
    "title": "Personalized GLP-1 Weight Loss Assessment",
    "description": "A comprehensive evaluation to determine the most suitable GLP-1 medication for your weight loss journey",
    "empathic_intro": (
        "Starting a weight loss journey takes courage. We're here to support you every step of the way "
        "with safe, effective treatment options tailored to your unique needs and health profile."
    ),
    "estimated_time": "8-12 minutes",
    "primary_concern_question": None,
    "questions": [
        {
            "id": "current_weight", "type": "number",
            "title": "What is your current weight?",
            "required": True, "category": "demographics", "weight": 1.0,
            "validation_rules": {"min": 80, "max": 600},
        },
        {
            "id": "current_height", "type": "number",
            "title": "What is your height in inches?",
            "required": True, "category": "demographics", "weight": 1.0,
            "validation_rules": {"min": 48, "max": 84},
        },
        {
            "id": "weight_loss_goal", "type": "multiple_choice",
            "title": "What is your weight loss goal?",
            "options": ["10-20 pounds", "21-40 pounds", "41-60 pounds", "61-80 pounds", "More than 80 pounds"],
            "required": True, "category": "goals", "weight": 1.2,
        },
        {
            "id": "previous_attempts", "type": "checkbox",
            "title": "Which weight loss methods have you tried before?",
            "options": [
                "Diet and exercise alone",
                "Commercial weight loss programs (Weight Watchers, Jenny Craig)",
                "Prescription weight loss medications",
                "Bariatric surgery consultation",
                "Meal replacement shakes",
                "Intermittent fasting",
                "Low-carb/Keto diets",
                "Personal trainer/nutritionist",
            ],
            "required": True, "category": "history", "weight": 1.1,
        },
        {
            "id": "diabetes_status", "type": "multiple_choice",
            "title": "What is your diabetes status?",
            "options": [
                "No diabetes",
                "Pre-diabetes (A1C 5.7-6.4%)",
                "Type 2 diabetes - well controlled",
                "Type 2 diabetes - needs improvement",
                "Type 2 diabetes - recently diagnosed",
                "Type 1 diabetes",
            ],
            "required": True, "category": "medical_history", "weight": 2.0,
        },
        {
            "id": "eating_patterns", "type": "checkbox",
            "title": "Which eating patterns do you struggle with?",
            "options": [
                "Frequent snacking throughout the day",
                "Large portion sizes at meals",
                "Emotional eating when stressed",
                "Late-night eating",
                "Fast food/convenience food reliance",
                "Binge eating episodes",
                "Constant food cravings",
                "Eating when not hungry",
            ],
            "required": True, "category": "behavior", "weight": 1.5,
        },
        {
            "id": "medical_conditions", "type": "checkbox",
            "title": "Do you have any of these medical conditions?",
            "options": [
                "High blood pressure",
                "High cholesterol",
                "Heart disease",
                "Kidney disease",
                "Liver disease",
                "Thyroid disorders",
                "Depression or anxiety",
                "Sleep apnea",
                "PCOS (women)",
                "Gastroparesis",
                "Pancreatitis history",
            ],
            "required": True, "category": "medical_history", "weight": 2.0,
        },
        {
            "id": "current_medications", "type": "checkbox",
            "title": "Are you currently taking any of these medications?",
            "options": [
                "Insulin",
                "Metformin",
                "Other diabetes medications",
                "Blood pressure medications",
                "Antidepressants",
                "Blood thinners",
                "Thyroid medications",
                "Birth control pills",
                "None of the above",
            ],
            "required": True, "category": "medications", "weight": 1.8,
        },
        {
            "id": "lifestyle_factors", "type": "multiple_choice",
            "title": "How would you describe your current activity level?",
            "options": [
                "Sedentary - little to no exercise",
                "Lightly active - light exercise 1-3 days/week",
                "Moderately active - moderate exercise 3-5 days/week",
                "Very active - hard exercise 6-7 days/week",
                "Extremely active - hard daily exercise",
            ],
            "required": True, "category": "lifestyle", "weight": 1.3,
        },
        {
            "id": "side_effect_concerns", "type": "checkbox",
            "title": "Which potential side effects concern you most?",
            "options": [
                "Nausea and vomiting",
                "Diarrhea or stomach upset",
                "Injection site reactions",
                "Fatigue or low energy",
                "Cost of medication",
                "Weekly injection schedule",
                "Long-term safety unknown",
                "Hair loss",
                "Gallbladder issues",
            ],
            "required": False, "category": "preferences", "weight": 1.0,
        },
        {
            "id": "support_system", "type": "multiple_choice",
            "title": "How would you describe your support system for weight loss?",
            "options": [
                "Strong family/friend support",
                "Some support but limited",
                "Minimal support system",
                "Feel like I'm on my own",
                "Have professional support (nutritionist, trainer)",
            ],
            "required": True, "category": "psychosocial", "weight": 1.2,
        },
        {
            "id": "treatment_commitment", "type": "multiple_choice",
            "title": "How long are you willing to commit to GLP-1 treatment?",
            "options": [
                "3-6 months to see if it works",
                "6-12 months for significant results",
                "1-2 years for comprehensive weight loss",
                "As long as it takes to reach my goal",
                "Uncertain about timeline",
            ],
            "required": True, "category": "commitment", "weight": 1.4,
        },
    ],
    "educational_inserts": [
        {
            "id": "bmi_education", "type": "education",
            "title": "Understanding BMI and Health",
            "content": (
                "BMI is calculated as weight (kg) divided by height (m²). While not perfect, it helps doctors "
                "assess health risks. A BMI of 30+ qualifies for weight loss medication, but individual factors "
                "matter more than numbers alone."
            ),
            "after_question": "current_height",
        },
        {
            "id": "glp1_mechanism", "type": "education",
            "title": "How GLP-1 Medications Work",
            "content": (
                "GLP-1 medications mimic hormones your body naturally produces after eating. They slow "
                "digestion, reduce appetite, and help you feel full longer."
            ),
            "after_question": "weight_loss_goal",
        },
        {
            "id": "success_statistics", "type": "statistic",
            "title": "Real Success Rates",
            "content": (
                "Clinical trials show 15-20% average weight loss with GLP-1 medications. 85% of people lose at "
                "least 5% of their body weight when combined with lifestyle changes."
            ),
            "after_question": "previous_attempts",
        },
        {
            "id": "diabetes_benefit", "type": "fact",
            "title": "Dual Benefits for Diabetes",
            "content": (
                "GLP-1 medications were originally developed for diabetes. They can lower A1C by 1-2% and "
                "reduce heart disease risk while promoting weight loss."
            ),
            "after_question": "diabetes_status",
        },
        {
            "id": "lifestyle_synergy", "type": "encouragement",
            "title": "Medication + Lifestyle = Success",
            "content": (
                "GLP-1 medications work best when combined with healthy eating and regular movement. Think of "
                "the medication as a tool that makes healthy choices easier."
            ),
            "after_question": "lifestyle_factors",
        },
    ],
    "medications": [
        {
            "id": "semaglutide", "name": "Semaglutide", "generic_name": "semaglutide",
            "dosages": ["0.25mg", "0.5mg", "1.0mg", "1.7mg", "2.4mg"],
            "description": "Weekly injection with proven weight loss and cardiovascular benefits",
            "side_effects": ["Nausea", "Vomiting", "Diarrhea", "Constipation", "Injection site reactions"],
            "contraindications": [
                "Personal/family history of medullary thyroid cancer",
                "Multiple endocrine neoplasia syndrome type 2",
                "Severe gastroparesis",
            ],
            "cost": 1200, "effectiveness": 9,
            "suitability_factors": {
                "diabetes_status": 2.0,
                "medical_conditions": 1.5,
                "weight_loss_goal": 1.8,
                "eating_patterns": 1.7,
            },
        },
        {
            "id": "tirzepatide", "name": "Tirzepatide", "generic_name": "tirzepatide",
            "dosages": ["2.5mg", "5mg", "7.5mg", "10mg", "12.5mg", "15mg"],
            "description": "Dual-action weekly injection with the highest weight loss efficacy",
            "side_effects": ["Nausea", "Vomiting", "Diarrhea", "Decreased appetite", "Fatigue"],
            "contraindications": [
                "Personal/family history of medullary thyroid cancer",
                "Multiple endocrine neoplasia syndrome type 2",
            ],
            "cost": 1400, "effectiveness": 10,
            "suitability_factors": {
                "diabetes_status": 2.2,
                "weight_loss_goal": 2.0,
                "medical_conditions": 1.6,
                "treatment_commitment": 1.8,
            },
        },
        {
            "id": "liraglutide", "name": "Liraglutide", "generic_name": "liraglutide",
            "dosages": ["0.6mg", "1.2mg", "1.8mg", "2.4mg", "3.0mg"],
            "description": "Daily injection with established safety profile and cardiovascular benefits",
            "side_effects": ["Nausea", "Hypoglycemia", "Diarrhea", "Headache", "Injection site reactions"],
            "contraindications": [
                "Personal/family history of medullary thyroid cancer",
                "Multiple endocrine neoplasia syndrome type 2",
            ],
            "cost": 900, "effectiveness": 7,
            "suitability_factors": {
                "medical_conditions": 2.0,
                "current_medications": 1.5,
                "side_effect_concerns": 1.8,
                "treatment_commitment": 1.2,
            },
        },
    ],
    "ai_logic": {
        "scoring_weights": {
            "diabetes_status": 2.0,
            "medical_conditions": 1.8,
            "weight_loss_goal": 1.5,
            "eating_patterns": 1.3,
            "treatment_commitment": 1.4,
        },
        "contraindication_rules": [
            {
                "condition": 'medical_conditions includes "Pancreatitis history"',
                "result": "consultation_required",
                "message": "History of pancreatitis requires careful medical evaluation before starting GLP-1 therapy.",
            },
            {
                "condition": 'medical_conditions includes "Gastroparesis"',
                "result": "medication_contraindicated",
                "message": "GLP-1 medications can worsen gastroparesis and are not recommended.",
            },
        ],
    },
}


# ==================== MEN'S ED ====================

MENS_ED_QUESTIONNAIRE_DOC: Dict[str, Any] = {
    "id": "mens_ed_treatment",
    "category": "Men's Health",
    "title": "Confidential ED Treatment Assessment",
    "description": "A private, comprehensive evaluation to find the most effective ED treatment for you",
    "empathic_intro": (
        "Erectile dysfunction is more common than you might think, affecting 40% of men over 40. "
        "This assessment is completely confidential."
    ),
    "estimated_time": "6-10 minutes",
    "primary_concern_question": None,
    "questions": [
        {
            "id": "age_range", "type": "multiple_choice",
            "title": "What is your age range?",
            "options": ["18-29", "30-39", "40-49", "50-59", "60-69", "70+"],
            "required": True, "category": "demographics", "weight": 1.5,
        },
        {
            "id": "ed_severity", "type": "multiple_choice",
            "title": "How would you describe your erectile difficulties?",
            "options": [
                "Mild - occasional difficulty (can achieve erection 60-80% of the time)",
                "Moderate - regular difficulty (can achieve erection 40-60% of the time)",
                "Severe - frequent difficulty (can achieve erection 20-40% of the time)",
                "Complete - unable to achieve erection suitable for penetration",
            ],
            "required": True, "category": "symptoms", "weight": 2.0,
        },
        {
            "id": "duration", "type": "multiple_choice",
            "title": "How long have you been experiencing ED symptoms?",
            "options": ["Less than 3 months", "3-6 months", "6-12 months", "1-2 years", "More than 2 years"],
            "required": True, "category": "history", "weight": 1.3,
        },
        {
            "id": "onset_type", "type": "multiple_choice",
            "title": "How did your ED symptoms begin?",
            "options": [
                "Suddenly - was fine, then problems started",
                "Gradually - slowly worsened over time",
                "Situational - only with certain partners/situations",
                "Always had some difficulty",
            ],
            "required": True, "category": "symptoms", "weight": 1.4,
        },
        {
            "id": "cardiovascular_health", "type": "checkbox",
            "title": "Do you have any cardiovascular conditions?",
            "options": [
                "High blood pressure",
                "High cholesterol",
                "Heart disease/heart attack",
                "Chest pain (angina)",
                "Irregular heartbeat",
                "Stroke",
                "Peripheral artery disease",
                "None of the above",
            ],
            "required": True, "category": "medical_history", "weight": 2.5,
        },
        {
            "id": "diabetes_status", "type": "multiple_choice",
            "title": "Do you have diabetes?",
            "options": [
                "No diabetes",
                "Pre-diabetes",
                "Type 2 diabetes - well controlled",
                "Type 2 diabetes - poorly controlled",
                "Type 1 diabetes",
            ],
            "required": True, "category": "medical_history", "weight": 2.0,
        },
        {
            "id": "medications", "type": "checkbox",
            "title": "Are you taking any of these medications?",
            "options": [
                "Blood pressure medications",
                "Antidepressants",
                "Anti-anxiety medications",
                "Prostate medications",
                "Blood thinners",
                "Heart medications (nitrates)",
                "Seizure medications",
                "None of the above",
            ],
            "required": True, "category": "medications", "weight": 2.2,
        },
        {
            "id": "lifestyle_factors", "type": "checkbox",
            "title": "Which lifestyle factors apply to you?",
            "options": [
                "Regular smoking",
                "Regular alcohol use (more than 2 drinks/day)",
                "Regular exercise (3+ times/week)",
                "Overweight/obese",
                "High stress job/life",
                "Poor sleep quality",
                "Recreational drug use",
                "Sedentary lifestyle",
            ],
            "required": True, "category": "lifestyle", "weight": 1.8,
        },
        {
            "id": "psychological_factors", "type": "checkbox",
            "title": "Have you experienced any of these psychological factors?",
            "options": [
                "Depression",
                "Anxiety",
                "Relationship stress",
                "Work/financial stress",
                "Performance anxiety",
                "Low self-esteem",
                "Previous traumatic experiences",
                "None of the above",
            ],
            "required": True, "category": "psychological", "weight": 1.6,
        },
        {
            "id": "morning_erections", "type": "multiple_choice",
            "title": "How often do you wake up with an erection?",
            "options": ["Daily or almost daily", "A few times per week", "Once a week or less", "Rarely or never"],
            "required": True, "category": "symptoms", "weight": 1.7,
        },
        {
            "id": "masturbation_function", "type": "multiple_choice",
            "title": "Can you achieve erection during masturbation?",
            "options": [
                "Yes, without difficulty",
                "Yes, but with some difficulty",
                "Sometimes, inconsistently",
                "Rarely or never",
            ],
            "required": True, "category": "symptoms", "weight": 1.8,
        },
        {
            "id": "treatment_goals", "type": "multiple_choice",
            "title": "What is your primary goal for ED treatment?",
            "options": [
                "Reliable erections for planned intimacy",
                "Spontaneous ability without planning",
                "Improved confidence and self-esteem",
                "Better relationship satisfaction",
                "Return to previous function level",
            ],
            "required": True, "category": "goals", "weight": 1.3,
        },
    ],
    "educational_inserts": [
        {
            "id": "ed_prevalence", "type": "statistic",
            "title": "You're Not Alone",
            "content": "40% of men over 40 experience some form of ED. By age 70, nearly 70% of men have some degree of erectile dysfunction.",
            "after_question": "age_range",
        },
        {
            "id": "blood_flow_education", "type": "education",
            "title": "Understanding Erectile Function",
            "content": "Erections require healthy blood vessels, nerves, hormones, and psychology. ED medications work by improving blood flow during arousal.",
            "after_question": "ed_severity",
        },
        {
            "id": "heart_connection", "type": "fact",
            "title": "ED and Heart Health Connection",
            "content": "ED is often an early warning sign of heart disease, because the smaller blood vessels involved show problems first.",
            "after_question": "cardiovascular_health",
        },
        {
            "id": "success_rates", "type": "statistic",
            "title": "Treatment Success Rates",
            "content": "ED medications are highly effective: sildenafil works for 80% of men, tadalafil for 85%, and vardenafil for 80%.",
            "after_question": "medications",
        },
        {
            "id": "lifestyle_impact", "type": "encouragement",
            "title": "Lifestyle Changes Make a Difference",
            "content": "30 minutes of walking daily, quitting smoking, limiting alcohol and managing stress work together with medication.",
            "after_question": "lifestyle_factors",
        },
    ],
    "medications": [
        {
            "id": "sildenafil", "name": "Sildenafil (Viagra)", "generic_name": "sildenafil",
            "dosages": ["25mg", "50mg", "100mg"],
            "description": "The original ED medication with 4-hour effectiveness window",
            "side_effects": ["Headache", "Flushing", "Nasal congestion", "Visual changes", "Muscle aches"],
            "contraindications": ["Nitrate medications", "Severe heart disease", "Recent stroke/heart attack"],
            "cost": 70, "effectiveness": 8,
            "suitability_factors": {
                "cardiovascular_health": -2.0,
                "medications": -1.5,
                "treatment_goals": 1.2,
            },
        },
        {
            "id": "tadalafil", "name": "Tadalafil (Cialis)", "generic_name": "tadalafil",
            "dosages": ["2.5mg daily", "5mg daily", "10mg", "20mg"],
            "description": "36-hour effectiveness window allowing for spontaneity",
            "side_effects": ["Headache", "Back pain", "Muscle aches", "Flushing", "Nasal congestion"],
            "contraindications": ["Nitrate medications", "Severe liver disease", "Severe heart disease"],
            "cost": 85, "effectiveness": 9,
            "suitability_factors": {
                "treatment_goals": 2.0,
                "cardiovascular_health": -1.8,
                "lifestyle_factors": 1.5,
            },
        },
        {
            "id": "vardenafil", "name": "Vardenafil (Levitra)", "generic_name": "vardenafil",
            "dosages": ["5mg", "10mg", "20mg"],
            "description": "Fast-acting with fewer food interactions",
            "side_effects": ["Headache", "Flushing", "Nasal congestion", "Dizziness"],
            "contraindications": ["Nitrate medications", "Severe heart disease", "QT prolongation"],
            "cost": 75, "effectiveness": 8,
            "suitability_factors": {
                "diabetes_status": 1.8,
                "cardiovascular_health": -2.0,
                "age_range": 1.3,
            },
        },
    ],
    "ai_logic": {
        "scoring_weights": {
            "cardiovascular_health": 2.5,
            "medications": 2.2,
            "ed_severity": 2.0,
            "diabetes_status": 2.0,
            "treatment_goals": 1.5,
        },
        "contraindication_rules": [
            {
                "condition": 'medications includes "Heart medications (nitrates)"',
                "result": "medication_contraindicated",
                "message": (
                    "ED medications cannot be safely combined with nitrate medications due to dangerous "
                    "blood pressure drops."
                ),
            },
            {
                "condition": 'cardiovascular_health includes "Heart disease/heart attack"',
                "result": "consultation_required",
                "message": "Recent cardiovascular events require cardiology clearance before starting ED medications.",
            },
        ],
    },
}


# ==================== PRESCRIPTION SKINCARE ====================

SKIN_CARE_QUESTIONNAIRE_DOC: Dict[str, Any] = {
    "id": "prescription_skincare",
    "category": "Dermatology",
    "title": "Personalized Prescription Skincare Assessment",
    "description": "Professional evaluation to determine the most effective prescription treatments for your skin concerns",
    "empathic_intro": (
        "Your skin is unique, and so should be your treatment. Our goal is to help you achieve healthy, "
        "clear skin with safe, effective prescription treatments."
    ),
    "estimated_time": "5-8 minutes",
    "questions": [
        {
            "id": "primary_concern", "type": "multiple_choice",
            "title": "What is your primary skin concern?",
            "options": [
                "Acne and breakouts",
                "Signs of aging (wrinkles, fine lines)",
                "Hyperpigmentation and dark spots",
                "Melasma",
                "Rosacea and redness",
                "Rough texture and large pores",
                "Sun damage and age spots",
                "Combination of multiple concerns",
            ],
            "required": True, "category": "concerns", "weight": 2.0,
        },
        {
            "id": "skin_type", "type": "multiple_choice",
            "title": "How would you describe your skin type?",
            "options": [
                "Oily - shiny, enlarged pores, frequent breakouts",
                "Dry - tight, flaky, rarely breaks out",
                "Combination - oily T-zone, dry cheeks",
                "Normal - balanced, few concerns",
                "Sensitive - easily irritated, reactive",
            ],
            "required": True, "category": "skin_type", "weight": 1.8,
        },
        {
            "id": "acne_severity", "type": "multiple_choice",
            "title": "If you have acne, how would you describe its severity?",
            "options": [
                "No current acne",
                "Mild - occasional pimples, mostly blackheads/whiteheads",
                "Moderate - regular breakouts, some inflammation",
                "Severe - frequent cystic acne, scarring",
                "Hormonal - breakouts around menstrual cycle",
            ],
            "required": True, "category": "acne", "weight": 1.9,
            "conditional_logic": {"show_if": {"question_id": "primary_concern", "value": "Acne and breakouts"}},
        },
        {
            "id": "current_routine", "type": "checkbox",
            "title": "What does your current skincare routine include?",
            "options": [
                "Daily cleanser",
                "Moisturizer",
                "Sunscreen (daily use)",
                "Retinol/retinoid products",
                "Vitamin C serum",
                "Salicylic acid/BHA",
                "Glycolic acid/AHA",
                "Benzoyl peroxide",
                "Prescription medications",
                "Just water and basic soap",
            ],
            "required": True, "category": "routine", "weight": 1.4,
        },
        {
            "id": "sun_exposure", "type": "multiple_choice",
            "title": "How much sun exposure do you typically get?",
            "options": [
                "Minimal - mostly indoors, always wear sunscreen",
                "Moderate - some outdoor time, usually wear sunscreen",
                "High - frequently outdoors, sometimes forget sunscreen",
                "Very high - work outside or frequent sun exposure",
                "Tanning bed use",
            ],
            "required": True, "category": "lifestyle", "weight": 1.6,
        },
        {
            "id": "age_range", "type": "multiple_choice",
            "title": "What is your age range?",
            "options": ["18-25", "26-35", "36-45", "46-55", "56-65", "65+"],
            "required": True, "category": "demographics", "weight": 1.3,
        },
        {
            "id": "hormonal_factors", "type": "checkbox",
            "title": "Do any of these hormonal factors apply to you?",
            "options": [
                "Pregnancy or trying to conceive",
                "Breastfeeding",
                "Menopause or perimenopause",
                "PCOS (polycystic ovary syndrome)",
                "Irregular menstrual cycles",
                "Birth control use",
                "Hormone replacement therapy",
                "None of the above",
            ],
            "required": True, "category": "hormonal", "weight": 1.7,
        },
        {
            "id": "previous_treatments", "type": "checkbox",
            "title": "Which prescription treatments have you tried before?",
            "options": [
                "Tretinoin (Retin-A)",
                "Adapalene (Differin)",
                "Hydroquinone",
                "Topical antibiotics",
                "Oral antibiotics",
                "Birth control for acne",
                "Accutane (isotretinoin)",
                "Chemical peels",
                "Laser treatments",
                "None of the above",
            ],
            "required": True, "category": "history", "weight": 1.5,
        },
        {
            "id": "skin_sensitivity", "type": "multiple_choice",
            "title": "How does your skin typically react to new products?",
            "options": [
                "Very tolerant - rarely have reactions",
                "Somewhat tolerant - occasional mild irritation",
                "Moderately sensitive - react to some products",
                "Very sensitive - react to many products",
                "Extremely sensitive - react to most new products",
            ],
            "required": True, "category": "sensitivity", "weight": 1.8,
        },
        {
            "id": "treatment_goals", "type": "checkbox",
            "title": "What are your main goals for prescription skincare?",
            "options": [
                "Clear existing acne",
                "Prevent future breakouts",
                "Reduce fine lines and wrinkles",
                "Even out skin tone",
                "Fade dark spots and hyperpigmentation",
                "Improve skin texture",
                "Minimize pore appearance",
                "Boost overall skin radiance",
                "Slow signs of aging",
            ],
            "required": True, "category": "goals", "weight": 1.4,
        },
    ],
    "educational_inserts": [
        {
            "id": "prescription_benefits", "type": "education",
            "title": "Why Prescription Skincare?",
            "content": "Prescription treatments contain higher concentrations of active ingredients than over-the-counter products.",
            "after_question": "primary_concern",
        },
        {
            "id": "retinoid_facts", "type": "fact",
            "title": "The Gold Standard: Retinoids",
            "content": "Tretinoin increases cell turnover, builds collagen, and is effective for both acne and anti-aging.",
            "after_question": "skin_type",
        },
        {
            "id": "patience_message", "type": "encouragement",
            "title": "Good Things Take Time",
            "content": "Most people see initial results in 4-6 weeks, with significant improvement by 3-4 months.",
            "after_question": "current_routine",
        },
        {
            "id": "sun_protection_critical", "type": "fact",
            "title": "Sunscreen: Your Best Anti-Aging Tool",
            "content": "90% of visible aging is caused by UV damage. Daily broad-spectrum SPF 30+ is non-negotiable with prescription retinoids.",
            "after_question": "sun_exposure",
        },
    ],
    "medications": [
        {
            "id": "tretinoin", "name": "Tretinoin", "generic_name": "tretinoin",
            "dosages": ["0.025%", "0.05%", "0.1%"],
            "description": "The gold standard retinoid for acne and anti-aging",
            "side_effects": ["Initial dryness", "Peeling", "Redness", "Increased sun sensitivity"],
            "contraindications": ["Pregnancy", "Breastfeeding", "Eczema flares"],
            "cost": 60, "effectiveness": 9,
            "suitability_factors": {
                "primary_concern": 2.0,
                "skin_sensitivity": -1.5,
                "hormonal_factors": -2.0,
                "treatment_goals": 1.8,
            },
        },
        {
            "id": "hydroquinone", "name": "Hydroquinone", "generic_name": "hydroquinone",
            "dosages": ["2%", "4%"],
            "description": "Prescription-strength lightening agent for hyperpigmentation",
            "side_effects": ["Mild irritation", "Temporary redness", "Increased sun sensitivity"],
            "contraindications": ["Pregnancy", "Breastfeeding", "Sensitive skin"],
            "cost": 45, "effectiveness": 8,
            "suitability_factors": {
                "primary_concern": 1.8,
                "skin_type": 1.2,
                "sun_exposure": -1.8,
                "age_range": 1.5,
            },
        },
        {
            "id": "clindamycin", "name": "Clindamycin", "generic_name": "clindamycin phosphate",
            "dosages": ["1% gel", "1% solution", "1% lotion"],
            "description": "Topical antibiotic for inflammatory acne",
            "side_effects": ["Mild dryness", "Peeling", "Burning sensation"],
            "contraindications": ["History of antibiotic-associated colitis"],
            "cost": 35, "effectiveness": 7,
            "suitability_factors": {
                "acne_severity": 2.0,
                "skin_type": 1.3,
                "previous_treatments": 1.5,
            },
        },
    ],
    "ai_logic": {
        "scoring_weights": {
            "primary_concern": 2.0,
            "skin_sensitivity": 1.8,
            "hormonal_factors": 1.7,
            "acne_severity": 1.9,
            "treatment_goals": 1.4,
        },
        "contraindication_rules": [
            {
                "condition": 'hormonal_factors includes "Pregnancy or trying to conceive"',
                "result": "medication_contraindicated",
                "message": "Retinoids and hydroquinone are not safe during pregnancy. Alternative treatments are available.",
            },
            {
                "condition": 'skin_sensitivity equals "Extremely sensitive - react to most new products"',
                "result": "consultation_required",
                "message": "Very sensitive skin requires careful product selection and monitoring by a dermatologist.",
            },
        ],
    },
}


# ==================== HAIR GROWTH ====================

HAIR_GROWTH_QUESTIONNAIRE_DOC: Dict[str, Any] = {
    "id": "hair_growth_treatment",
    "category": "Hair Restoration",
    "title": "Comprehensive Hair Loss Treatment Assessment",
    "description": "Personalized evaluation to determine the most effective hair restoration treatments",
    "empathic_intro": (
        "Hair loss affects confidence and self-image. Modern treatments can slow, stop, and even reverse "
        "hair loss when started early."
    ),
    "estimated_time": "6-9 minutes",
    "primary_concern_question": None,
    "questions": [
        {
            "id": "gender", "type": "multiple_choice",
            "title": "What is your gender?",
            "options": ["Male", "Female", "Non-binary", "Prefer not to say"],
            "required": True, "category": "demographics", "weight": 1.8,
        },
        {
            "id": "age_range", "type": "multiple_choice",
            "title": "What is your age range?",
            "options": ["18-25", "26-35", "36-45", "46-55", "56-65", "65+"],
            "required": True, "category": "demographics", "weight": 1.5,
        },
        {
            "id": "hair_loss_pattern", "type": "multiple_choice",
            "title": "How would you describe your hair loss pattern?",
            "options": [
                "Receding hairline and crown thinning (male pattern)",
                "Diffuse thinning all over (female pattern)",
                "Patchy round spots (alopecia areata)",
                "Sudden overall thinning",
                "Hair loss after illness/stress",
                "Gradual thinning over years",
                "Mostly crown/vertex thinning",
                "Frontal hairline recession only",
            ],
            "required": True, "category": "pattern", "weight": 2.0,
        },
        {
            "id": "hair_loss_severity", "type": "multiple_choice",
            "title": "How would you rate your current hair loss?",
            "options": [
                "Minimal - slight recession or thinning",
                "Mild - noticeable but still good coverage",
                "Moderate - obvious thinning, some scalp visible",
                "Advanced - significant loss, scalp clearly visible",
                "Severe - very little hair remaining",
            ],
            "required": True, "category": "severity", "weight": 2.0,
        },
        {
            "id": "duration", "type": "multiple_choice",
            "title": "How long have you been losing hair?",
            "options": ["Less than 6 months", "6 months to 1 year", "1-3 years", "3-5 years", "More than 5 years"],
            "required": True, "category": "timeline", "weight": 1.6,
        },
        {
            "id": "family_history", "type": "checkbox",
            "title": "Who in your family has experienced hair loss?",
            "options": [
                "Father",
                "Mother",
                "Maternal grandfather",
                "Paternal grandfather",
                "Brothers",
                "Sisters",
                "Aunts/uncles",
                "No family history of hair loss",
            ],
            "required": True, "category": "genetics", "weight": 1.7,
        },
        {
            "id": "medical_conditions", "type": "checkbox",
            "title": "Do you have any of these medical conditions?",
            "options": [
                "Thyroid disorders",
                "Autoimmune conditions",
                "PCOS (women)",
                "Diabetes",
                "Iron deficiency/anemia",
                "Hormonal imbalances",
                "Scalp conditions (psoriasis, seborrheic dermatitis)",
                "Recent major surgery/illness",
                "None of the above",
            ],
            "required": True, "category": "medical_history", "weight": 1.9,
        },
        {
            "id": "medications", "type": "checkbox",
            "title": "Are you taking any medications that might affect hair?",
            "options": [
                "Blood thinners",
                "Antidepressants",
                "Blood pressure medications",
                "Cholesterol medications",
                "Birth control pills",
                "Hormone replacement therapy",
                "Chemotherapy (current or past)",
                "Steroids",
                "Seizure medications",
                "None of the above",
            ],
            "required": True, "category": "medications", "weight": 1.7,
        },
        {
            "id": "lifestyle_factors", "type": "checkbox",
            "title": "Which lifestyle factors might be affecting your hair?",
            "options": [
                "High stress levels",
                "Poor diet/nutrition",
                "Frequent tight hairstyles",
                "Excessive heat styling",
                "Chemical treatments (bleach, perms)",
                "Smoking",
                "Excessive alcohol consumption",
                "Lack of sleep",
                "Crash dieting/eating disorders",
                "Healthy lifestyle overall",
            ],
            "required": True, "category": "lifestyle", "weight": 1.4,
        },
        {
            "id": "current_treatments", "type": "checkbox",
            "title": "What hair loss treatments have you tried?",
            "options": [
                "Over-the-counter minoxidil (Rogaine)",
                "Prescription finasteride (Propecia)",
                "Biotin/hair vitamins",
                "Hair transplant surgery",
                "Laser therapy",
                "Platelet-rich plasma (PRP)",
                "Hair growth shampoos",
                "Essential oils/natural remedies",
                "None - this is my first treatment attempt",
            ],
            "required": True, "category": "treatment_history", "weight": 1.5,
        },
        {
            "id": "treatment_goals", "type": "multiple_choice",
            "title": "What is your primary goal for hair loss treatment?",
            "options": [
                "Stop further hair loss",
                "Regrow lost hair",
                "Improve hair thickness/density",
                "Restore hairline",
                "Maintain current hair",
                "Boost confidence and self-esteem",
                "Look younger/more attractive",
            ],
            "required": True, "category": "goals", "weight": 1.3,
        },
        {
            "id": "treatment_commitment", "type": "multiple_choice",
            "title": "How long are you willing to commit to treatment?",
            "options": [
                "3-6 months to try it out",
                "6-12 months for initial results",
                "1-2 years for significant improvement",
                "Long-term commitment as needed",
                "Uncertain about timeline",
            ],
            "required": True, "category": "commitment", "weight": 1.4,
        },
    ],
    "educational_inserts": [
        {
            "id": "hair_loss_statistics", "type": "statistic",
            "title": "Hair Loss is Common",
            "content": "85% of men will have significantly thinning hair by age 50. 40% of women will experience hair loss by age 40.",
            "after_question": "gender",
        },
        {
            "id": "hair_growth_cycle", "type": "education",
            "title": "Understanding Hair Growth",
            "content": "Hair grows in cycles: growth (anagen), transition (catagen), and rest (telogen). DHT shortens the growth phase in pattern baldness.",
            "after_question": "hair_loss_pattern",
        },
        {
            "id": "early_treatment_benefits", "type": "fact",
            "title": "Early Treatment = Better Results",
            "content": "Follicles dormant for less than 2 years have the best chance of responding to treatment.",
            "after_question": "duration",
        },
        {
            "id": "treatment_success_rates", "type": "statistic",
            "title": "Treatment Success Rates",
            "content": "Finasteride stops hair loss in 90% of men and regrows hair in 65%. Minoxidil stops loss in 85% and regrows hair in 40%.",
            "after_question": "current_treatments",
        },
        {
            "id": "patience_required", "type": "encouragement",
            "title": "Patience Brings Results",
            "content": "It takes 6 months to see initial results and 12 months for significant improvement.",
            "after_question": "treatment_commitment",
        },
    ],
    "medications": [
        {
            "id": "finasteride", "name": "Finasteride", "generic_name": "finasteride",
            "dosages": ["1mg daily"],
            "description": "Oral DHT blocker that stops hair loss and promotes regrowth",
            "side_effects": ["Decreased libido", "Erectile dysfunction", "Decreased ejaculation volume", "Breast tenderness"],
            "contraindications": ["Women of childbearing age", "Liver disease"],
            "cost": 30, "effectiveness": 9,
            "suitability_factors": {
                "gender": 2.0,
                "hair_loss_severity": 1.8,
                "age_range": 1.5,
                "treatment_goals": 1.7,
            },
        },
        {
            "id": "minoxidil", "name": "Minoxidil", "generic_name": "minoxidil",
            "dosages": ["5% solution", "5% foam"],
            "description": "Topical vasodilator that stimulates hair growth",
            "side_effects": ["Scalp irritation", "Unwanted facial hair growth", "Initial increased shedding"],
            "contraindications": ["Scalp conditions", "Heart conditions"],
            "cost": 25, "effectiveness": 7,
            "suitability_factors": {
                "hair_loss_pattern": 1.5,
                "medical_conditions": 1.3,
                "treatment_commitment": 1.4,
            },
        },
        {
            "id": "dutasteride", "name": "Dutasteride", "generic_name": "dutasteride",
            "dosages": ["0.5mg daily"],
            "description": "More potent DHT blocker for advanced hair loss",
            "side_effects": ["Decreased libido", "Erectile dysfunction", "Breast enlargement"],
            "contraindications": ["Women", "Liver disease", "Prostate cancer"],
            "cost": 45, "effectiveness": 9,
            "suitability_factors": {
                "hair_loss_severity": 2.0,
                # No question with this id; ignored when scoring.
                "previous_treatments": 1.8,
                "age_range": 1.6,
            },
        },
    ],
    "ai_logic": {
        "scoring_weights": {
            "hair_loss_severity": 2.0,
            "gender": 1.8,
            "hair_loss_pattern": 1.7,
            "medical_conditions": 1.9,
            "treatment_goals": 1.3,
        },
        "contraindication_rules": [
            {
                "condition": 'gender equals "Female" AND medications includes "None of the above"',
                "result": "consultation_required",
                "message": (
                    "Women's hair loss requires specialized evaluation as finasteride is not recommended "
                    "for women of childbearing age."
                ),
            },
            {
                "condition": 'medical_conditions includes "Recent major surgery/illness"',
                "result": "consultation_required",
                "message": "Acute hair loss after illness may be temporary and require different treatment approaches.",
            },
        ],
    },
}


# ==================== REGISTRY ====================

class QuestionnaireLibrary:
    """Loaded, validated questionnaires keyed by id, in declaration order."""

    DOCUMENTS = [
        GLP1_QUESTIONNAIRE_DOC,
        MENS_ED_QUESTIONNAIRE_DOC,
        SKIN_CARE_QUESTIONNAIRE_DOC,
        HAIR_GROWTH_QUESTIONNAIRE_DOC,
    ]

    _loaded: Optional[Dict[str, Questionnaire]] = None

    @classmethod
    def _load(cls) -> Dict[str, Questionnaire]:
        if cls._loaded is None:
            loaded = {}
            for document in cls.DOCUMENTS:
                questionnaire = questionnaire_from_dict(document)
                loaded[questionnaire.id] = questionnaire
            logger.info(f"📚 Loaded {len(loaded)} questionnaires: {', '.join(loaded)}")
            cls._loaded = loaded
        return cls._loaded

    @classmethod
    def all(cls) -> List[Questionnaire]:
        return list(cls._load().values())

    @classmethod
    def get(cls, questionnaire_id: str) -> Optional[Questionnaire]:
        return cls._load().get(questionnaire_id)


def get_questionnaire(questionnaire_id: str) -> Optional[Questionnaire]:
    return QuestionnaireLibrary.get(questionnaire_id)


def list_questionnaires() -> List[Questionnaire]:
    return QuestionnaireLibrary.all()
