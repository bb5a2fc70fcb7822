from __future__ import annotations

from talentscout.services.github.types import ProfileRecord

PROMPT_TEMPLATE = """
Analyze the following GitHub user profile and provide structured insights:

{profile_content}

Based on the information above, please provide a structured analysis with the following:

1. Primary skills (as a comma-separated list)
2. Tech stack (specific technologies and frameworks they seem familiar with)
3. Experience level (beginner, intermediate, advanced, or expert)
4. Notable contributions or focus areas
5. Brief professional summary (2-3 sentences)

Format the response as a JSON object with keys: "primary_skills", "tech_stack", "experience_level", "notable_contributions", and "professional_summary".
"""


def prepare_profile_content(profile: ProfileRecord) -> str:
    lines = [f"GitHub Username: {profile.username}"]
    if profile.display_name:
        lines.append(f"Display Name: {profile.display_name}")
    if profile.bio:
        lines.append(f"Bio: {profile.bio}")
    if profile.location:
        lines.append(f"Location: {profile.location}")
    if profile.contribution_count:
        lines.append(f"Contribution Count: {profile.contribution_count}")

    if profile.pinned_repositories:
        lines.append("")
        lines.append("Pinned Repositories:")
        for index, repo in enumerate(profile.pinned_repositories, start=1):
            language = f" ({repo.language})" if repo.language else ""
            lines.append(f"{index}. {repo.name}{language}")
            if repo.description:
                lines.append(f"   Description: {repo.description}")

    if profile.followers or profile.following:
        lines.append("")
        lines.append(f"Followers: {profile.followers}")
        lines.append(f"Following: {profile.following}")
    if profile.organizations:
        lines.append(f"Organizations: {', '.join(profile.organizations)}")
    if profile.profile_readme:
        lines.append("")
        lines.append("Profile README:")
        lines.append(profile.profile_readme)

    return "\n".join(lines) + "\n"


def build_prompt(profile: ProfileRecord) -> str:
    return PROMPT_TEMPLATE.format(profile_content=prepare_profile_content(profile))
