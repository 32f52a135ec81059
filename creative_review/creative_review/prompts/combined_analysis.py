"""
Combined creative analysis prompt: brand safety + qualitative scorecard.

The ordinal mapping and the per-format applicability rules are rendered from
``creative_review.features`` so the prompt documents exactly what the response
consumer derives.
"""

from ..features import describe_applicability, describe_feature_mapping

COMBINED_ANALYSIS_SYSTEM_PROMPT = """You are an expert creative advertising strategist and brand safety analyst. Your task is to perform a comprehensive analysis of the provided creative asset.
Your analysis MUST be informed by any available contextual and technical data.
You MUST return your full analysis ONLY as a single JSON object matching the output schema below. No markdown fences, no prose before or after the JSON.
"""

COMBINED_ANALYSIS_USER_TEMPLATE = '''**Analysis Process (Perform all steps):**

---
**Part 1: Brand Safety & Product Identification**
1.  **Visual & Contextual Analysis**: Analyze the entire creative asset. Identify any brand logos, specific product names, on-screen text, and the overall context.
2.  **Knowledge Base Augmentation**: Use your general knowledge to determine the correct Parent Company for the identified brand (e.g., "Dove" -> "Unilever").
3.  **Brand Safety Scan**: Analyze for brand safety issues, including profanity, violence, sensitive subjects, or nuanced contextual issues.
4.  **Populate Brand Safety Fields**: Fill out "parentCompany", "brand", "product" and "brandSafety". When "isSafe" is false, "flags" MUST list at least one issue tag and "reasoning" MUST explain the verdict. When "isSafe" is true, "flags" MUST be an empty list.

---
**Part 2: Deep Qualitative Analysis**
1.  **Identify Format:** Determine if the asset is a Video, Image, or Audio file and set "analysis.mediaFormat".
2.  **Standardize Components:** Break the asset down into its core components (visuals, audio, text).
3.  **Evaluate Against Rubric:** Score every field of the rubric below. Each field is an object with a "determination" and a one or two sentence "reasoning". For any field that is not applicable to the format you MUST return "Not Applicable" as the determination; never omit or guess it.
{applicability}
4.  **Populate Analysis Fields:** Fill out the "analysis" object.
5.  **Generate ML-Ready Features:** Convert your determinations into the flat numeric "mlReadyFeatures" object, one entry per rubric field, using exactly this mapping:
{feature_mapping}

---
**Output Schema**

{{
  "parentCompany": "<string>",
  "brand": "<string>",
  "product": "<string>",
  "brandSafety": {{"isSafe": <bool>, "flags": ["<string>"], "reasoning": "<string>"}},
  "analysis": {{
    "mediaFormat": "<Video|Image|Audio>",
    "messageStrategy": {{
      "hasSingleMessageFocus": {{"determination": <bool>, "reasoning": "<string>"}},
      "messageComplexity": {{"determination": "<Simple|Moderate|Complex>", "reasoning": "<string>"}},
      "usesRightBrainElements": {{"determination": <bool>, "reasoning": "<string>"}}
    }},
    "execution": {{
      "musicProminentlyFeatured": {{"determination": <bool>, "reasoning": "<string>"}},
      "isEmotionalStorytelling": {{"determination": <bool>, "reasoning": "<string>"}},
      "usesHumor": {{"determination": <bool>, "reasoning": "<string>"}},
      "pacing": {{"determination": "<Slow|Appropriate|Rushed|Not Applicable>", "reasoning": "<string>"}}
    }},
    "emotionalImpact": {{
      "isEmotionDriven": {{"determination": <bool>, "reasoning": "<string>"}},
      "primaryEmotion": {{"determination": "<Happiness|Trust|Urgency|Nostalgia|Surprise|Fear|Anger|Sadness|Neutral>", "reasoning": "<string>"}},
      "hasPositiveTone": {{"determination": <bool>, "reasoning": "<string>"}}
    }},
    "performance": {{
      "hasAttentionGrabbingIntro": {{"determination": <bool>, "reasoning": "<string>"}},
      "creativeNovelty": {{"determination": "<Formulaic|Original|Highly Novel>", "reasoning": "<string>"}},
      "brandFitScore": {{"determination": <int 1-5>, "reasoning": "<string>"}},
      "targetAudienceAlignmentScore": {{"determination": <int 1-5>, "reasoning": "<string>"}},
      "hasClearCallToAction": {{"determination": "<Clear|Vague|None>", "reasoning": "<string>"}}
    }}
  }},
  "mlReadyFeatures": {{
    "hasSingleMessageFocus": <int>, "messageComplexity": <int>, "usesRightBrainElements": <int>,
    "musicProminentlyFeatured": <int>, "isEmotionalStorytelling": <int>, "usesHumor": <int>, "pacing": <int>,
    "isEmotionDriven": <int>, "primaryEmotion": <int>, "hasPositiveTone": <int>,
    "hasAttentionGrabbingIntro": <int>, "creativeNovelty": <int>, "brandFitScore": <int>,
    "targetAudienceAlignmentScore": <int>, "hasClearCallToAction": <int>
  }}
}}

---
**Asset to Analyze:** the attached {mime_type} file.

--- Provided Context ---
{context_string}
--- End Provided Context ---
'''


def render_user_prompt(context_string: str, mime_type: str) -> str:
    """Fill the user template with the context blob and the fixed rubric tables."""
    return COMBINED_ANALYSIS_USER_TEMPLATE.format(
        applicability=describe_applicability(),
        feature_mapping=describe_feature_mapping(),
        mime_type=mime_type,
        context_string=context_string,
    )
