"""
Resume-step resolution for returning visitors.
"""
import json
import unittest

from schemas.form_data import FormDataSchema
from services.resume import count_documents, resume_path, resume_path_from_stored, resume_step_index


def _complete_form():
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "selectedServices": ["certified-copy"],
        "serviceDocuments": {"certified-copy": [{"name": "passport.pdf"}]},
        "deliveryMethod": "email",
    }


class TestResumeStepIndex(unittest.TestCase):
    def test_missing_identity(self):
        form = _complete_form()
        form["firstName"] = ""
        form["lastName"] = ""
        self.assertEqual(resume_step_index(form), 0)

    def test_whitespace_email_counts_as_blank(self):
        form = _complete_form()
        form["email"] = "   "
        self.assertEqual(resume_step_index(form), 0)

    def test_no_services(self):
        form = _complete_form()
        form["selectedServices"] = []
        self.assertEqual(resume_step_index(form), 1)

    def test_no_documents(self):
        form = _complete_form()
        form["serviceDocuments"] = {}
        self.assertEqual(resume_step_index(form), 2)

    def test_documents_of_unselected_services_do_not_count(self):
        form = _complete_form()
        form["serviceDocuments"] = {"apostille": [{"name": "deed.pdf"}]}
        self.assertEqual(count_documents(form), 0)
        self.assertEqual(resume_step_index(form), 2)

    def test_no_delivery_method(self):
        form = _complete_form()
        form["deliveryMethod"] = None
        self.assertEqual(resume_step_index(form), 3)

    def test_complete(self):
        self.assertEqual(resume_step_index(_complete_form()), 4)

    def test_idempotent(self):
        form = _complete_form()
        form["deliveryMethod"] = None
        self.assertEqual(resume_step_index(form), resume_step_index(form))

    def test_accepts_schema(self):
        self.assertEqual(resume_step_index(FormDataSchema.model_validate(_complete_form())), 4)
        self.assertEqual(resume_step_index(FormDataSchema()), 0)

    def test_empty_input(self):
        self.assertEqual(resume_step_index(None), 0)
        self.assertEqual(resume_step_index({}), 0)


class TestResumePath(unittest.TestCase):
    def test_path_without_query(self):
        self.assertEqual(resume_path(_complete_form()), "/form/summary")

    def test_query_preserved(self):
        form = _complete_form()
        form["selectedServices"] = []
        self.assertEqual(resume_path(form, "service=apostille&lang=fr"), "/form/choose-services?service=apostille&lang=fr")
        self.assertEqual(resume_path(form, "?lang=fr"), "/form/choose-services?lang=fr")

    def test_stored_draft(self):
        self.assertEqual(resume_path_from_stored(json.dumps(_complete_form())), "/form/summary")

    def test_malformed_stored_draft_falls_back(self):
        self.assertEqual(resume_path_from_stored("{not json"), "/form/personal-info")
        self.assertEqual(resume_path_from_stored("[1, 2]", "lang=en"), "/form/personal-info?lang=en")
        self.assertEqual(resume_path_from_stored(None), "/form/personal-info")


if __name__ == "__main__":
    unittest.main()
