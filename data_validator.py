import logging
from typing import Any, Dict, List, Mapping

from services.errors import InputValidationError


IDENTIFYING_FIELDS = ["name", "title", "company", "url"]
TEXT_FIELDS = ["name", "title", "company", "url", "location"]


class ProfileValidator:
    def __init__(self):
        self.validation_stats = {
            'total_profiles': 0,
            'valid_profiles': 0,
            'invalid_profiles': 0,
            'duplicates_removed': 0,
            'validation_errors': []
        }

    def check_shape(self, profile: Any) -> None:
        """Fail fast on records the scorer cannot read at all."""
        if not isinstance(profile, Mapping):
            raise InputValidationError(f"Profile must be an object, got {type(profile).__name__}")
        skills = profile.get('skills')
        if skills is not None and (
            not isinstance(skills, list) or not all(isinstance(s, str) for s in skills)
        ):
            raise InputValidationError("Profile skills must be a list of strings")
        confidence = profile.get('confidence')
        if confidence is not None and (isinstance(confidence, bool) or not isinstance(confidence, (int, float))):
            raise InputValidationError(f"Profile confidence must be numeric, got {confidence!r}")
        for field in TEXT_FIELDS:
            value = profile.get(field)
            if value is not None and not isinstance(value, str):
                raise InputValidationError(f"Profile field {field} must be text, got {type(value).__name__}")

    def validate_profile_data(self, profile: Mapping) -> Dict[str, Any]:
        """Validate a single profile and return validation results."""
        validation_result = {
            'is_valid': True,
            'errors': [],
            'profile': profile
        }

        if not any(isinstance(profile.get(f), str) and profile.get(f).strip() for f in IDENTIFYING_FIELDS):
            validation_result['errors'].append("Profile has no name, title, company or url")

        validation_result['is_valid'] = len(validation_result['errors']) == 0

        self.validation_stats['total_profiles'] += 1
        if validation_result['is_valid']:
            self.validation_stats['valid_profiles'] += 1
        else:
            self.validation_stats['invalid_profiles'] += 1
            self.validation_stats['validation_errors'].extend(validation_result['errors'])

        return validation_result

    def validate_all_profiles(self, profiles: List[Mapping]) -> List[Dict]:
        """Validate and clean all profiles; return only the valid ones."""
        valid_profiles = []

        logging.info(f"Starting validation of {len(profiles)} profiles")

        for i, profile in enumerate(profiles):
            self.check_shape(profile)
            cleaned = self.clean_profile_data(profile)
            validation_result = self.validate_profile_data(cleaned)
            if validation_result['is_valid']:
                valid_profiles.append(cleaned)
            else:
                logging.warning(f"Profile {i+1} dropped: {validation_result['errors']}")

        logging.info(f"Validation completed. Valid: {len(valid_profiles)}, "
                     f"Invalid: {len(profiles) - len(valid_profiles)}")

        return valid_profiles

    def clean_profile_data(self, profile: Mapping) -> Dict:
        """Trim text fields and skills; map the legacy profileUrl key to url."""
        cleaned = dict(profile)

        if not cleaned.get('url'):
            for alias in ('profileUrl', 'profile_url', 'link'):
                if cleaned.get(alias):
                    cleaned['url'] = cleaned[alias]
                    break

        for field in TEXT_FIELDS:
            if isinstance(cleaned.get(field), str):
                cleaned[field] = cleaned[field].strip()

        if isinstance(cleaned.get('skills'), list):
            cleaned['skills'] = [s.strip() for s in cleaned['skills'] if s and s.strip()]

        return cleaned

    def remove_duplicates(self, profiles: List[Dict]) -> List[Dict]:
        """Remove duplicate profiles by url; profiles without a url are kept."""
        seen_urls = set()
        unique_profiles = []

        for profile in profiles:
            url = (profile.get('url') or '').rstrip('/').lower()
            if url and url in seen_urls:
                continue
            if url:
                seen_urls.add(url)
            unique_profiles.append(profile)

        duplicates_removed = len(profiles) - len(unique_profiles)
        if duplicates_removed > 0:
            self.validation_stats['duplicates_removed'] += duplicates_removed
            logging.info(f"Removed {duplicates_removed} duplicate profiles")

        return unique_profiles

    def get_validation_stats(self) -> Dict:
        """Return validation statistics."""
        return self.validation_stats.copy()
