from licensing.user_license import LicenseOption, LicenseOwner, Project, UserLicense


class TestLicenseOwner:
    def test_display_name_joins_names(self):
        owner = LicenseOwner(id="o1", email="o@example.com", first_name="Ada", last_name="Lovelace")
        assert owner.display_name == "Ada Lovelace"

    def test_display_name_falls_back_to_user(self):
        assert LicenseOwner(id="o1", email="o@example.com").display_name == "User"


class TestUserLicenseNames:
    def test_names_from_license_and_first_project(self):
        user_license = UserLicense(
            license=LicenseOption(id="l1", name="Pro", projects=[Project(id="p1", name="Acme"), Project(id="p2")])
        )
        assert user_license.license_title == "Pro"
        assert user_license.project_title == "Acme"

    def test_defaults_when_data_missing(self):
        user_license = UserLicense()
        assert user_license.license_title == "your license"
        assert user_license.project_title == "your project"
