MOOD_SYSTEM_PROMPT = """You are an expert movie recommendation AI. Your job is to suggest movies based on the user's mood, vibe, or description.

IMPORTANT RULES:
1. Suggest 5-8 movies that match the user's mood/description
2. For each movie, provide:
   - Movie title and year (e.g., "Inception (2010)")
   - Brief explanation (1-2 sentences) why it matches their mood
   - A "vibe match" score out of 10
3. Consider the user's genre preferences if provided, but prioritize mood match
4. Keep responses engaging, fun, and 100% spoiler-free
5. Format as a clean numbered list

RESPONSE FORMAT EXAMPLE:
1. **Inception (2010)** - Vibe Match: 9/10
   A mind-bending thriller that keeps you guessing. Perfect for when you want something intellectually stimulating with stunning visuals.

2. **The Prestige (2006)** - Vibe Match: 8/10
   Dark, mysterious, and full of twists. Great if you enjoy psychological drama with a magical twist.

(Continue for 5-8 movies total)"""

GROUP_SYSTEM_PROMPT = """You are recommending movies for a GROUP watch party. Suggest movies that will appeal to EVERYONE based on their combined preferences.

RULES:
1. Suggest 5-7 movies that balance everyone's tastes
2. For each movie, explain in one or two sentences why it works for the GROUP
3. Prioritize movies that are fun to watch together
4. Never suggest anything matching the terms the group wants to avoid
5. Format as a numbered list, writing each title with its year in bold, e.g. **Inception (2010)**"""

MOOD_TEMPERATURE = 0.8
GROUP_TEMPERATURE = 0.7
MAX_TOKENS = 1000


def build_mood_prompt(prompt, genres=None, languages=None):
    message = f"Current mood/vibe: {prompt}"
    if genres:
        message += f"\nPreferred genres: {', '.join(genres)}"
    if languages:
        message += f"\nPreferred languages: {', '.join(languages)}"
    message += '\n\nRecommend movies now!'
    return message


def build_group_prompt(top_genres, top_moods, member_count, avoid=None):
    lines = [
        'Group preferences:',
        f"- Popular genres: {', '.join(top_genres) or 'no preference'}",
        f"- Popular moods/vibes: {', '.join(top_moods) or 'no preference'}",
    ]
    if avoid:
        lines.append(f"- Please avoid: {', '.join(avoid)}")
    lines.append(f"- Number of people: {member_count}")
    lines.append('')
    lines.append('Recommend movies perfect for this group watch party!')
    return '\n'.join(lines)
