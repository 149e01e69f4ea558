from django.apps import apps
from django.test.runner import DiscoverRunner


LOCAL_APP_PREFIX = 'apps.core.'


class InstalledAppsOnlyDiscoverRunner(DiscoverRunner):
    """`manage.py test` without labels runs the tests of the school apps only."""

    def build_suite(self, test_labels=None, **kwargs):
        if not test_labels:
            test_labels = [
                app_config.name
                for app_config in apps.get_app_configs()
                if app_config.name.startswith(LOCAL_APP_PREFIX)
            ]
        return super().build_suite(test_labels=test_labels, **kwargs)
