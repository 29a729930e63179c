"""Field validators shared by checkout and account registration."""


def is_valid_email(email: str) -> bool:
    """Structural email check: one @, sane local and domain parts, no forbidden characters."""
    if any(ch in email for ch in (" ", "\t", "\n")):
        return False

    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False

    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False

    if "." not in domain_part:
        return False

    for label in domain_part.split("."):
        if not label or label.startswith("-") or label.endswith("-"):
            return False

    if ".." in local_part:
        return False

    return not any(forbidden in email for forbidden in (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\"))
