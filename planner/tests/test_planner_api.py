import os
import tempfile
import unittest

from fastapi.testclient import TestClient

from planner.api.api_run import create_app
from planner.events.Event_Bus import EventBus
from planner.infra.State_Repository import StateRepository
from planner.logic.session import PlannerSession

from state_builders import make_state, WEEK

DINNER_MON = {"mealType": "dinner", "day": 0}


class TestPlannerAPI(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        repo = StateRepository(os.path.join(self.tmp.name, "state.json"))
        self.session = PlannerSession(make_state(), event_bus=EventBus(), repository=repo)
        self.client = TestClient(create_app(self.session))

    def tearDown(self):
        self.tmp.cleanup()

    def ingredient(self, state, ingredient_id):
        return next(i for i in state['ingredients'] if i['id'] == ingredient_id)

    def test_get_state(self):
        resp = self.client.get('/api/state')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        for key in ('ingredients', 'meals', 'profiles', 'weekPlans', 'currentWeekStartDate', 'history'):
            self.assertIn(key, data)
        self.assertEqual(data['currentWeekStartDate'], WEEK)
        self.assertFalse(data['history']['canUndo'])

    def test_drop_remove_and_undo(self):
        resp = self.client.post('/api/slots/drop-ingredient',
                                json={"address": DINNER_MON, "ingredientId": "ing-chicken"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body['applied'])
        self.assertEqual(self.ingredient(body['state'], "ing-chicken")['count'], 3)

        body = self.client.post('/api/slots/remove-to-inventory', json={"address": DINNER_MON}).json()
        self.assertEqual(self.ingredient(body['state'], "ing-chicken")['count'], 4)

        body = self.client.post('/api/undo').json()
        self.assertTrue(body['applied'])
        self.assertEqual(self.ingredient(body['state'], "ing-chicken")['count'], 3)
        self.assertTrue(body['state']['history']['canRedo'])

    def test_invalid_address_is_rejected(self):
        resp = self.client.post('/api/slots/clear', json={"address": {"mealType": "brunch", "day": 0}})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.post('/api/slots/clear', json={"address": {"mealType": "dinner", "day": 7}})
        self.assertEqual(resp.status_code, 422)

    def test_no_op_reports_not_applied(self):
        body = self.client.post('/api/slots/clear', json={"address": DINNER_MON}).json()
        self.assertFalse(body['applied'])

    def test_meal_and_servings(self):
        body = self.client.post('/api/slots/drop-meal', json={"address": DINNER_MON, "mealId": "meal-cr"}).json()
        self.assertTrue(body['applied'])
        body = self.client.post('/api/slots/servings', json={"address": DINNER_MON, "servings": 4}).json()
        self.assertEqual(self.ingredient(body['state'], "ing-rice")['count'], 6)
        body = self.client.post('/api/slots/save-as-meal', json={"address": DINNER_MON, "name": "Big bowl"}).json()
        self.assertEqual(body['state']['meals'][0]['name'], "Big bowl")
        self.assertEqual(body['state']['pinnedMealIds'][0], body['state']['meals'][0]['id'])

    def test_ingredient_crud(self):
        body = self.client.post('/api/ingredients', json={"name": "eggs", "count": 1}).json()
        eggs = [i for i in body['state']['ingredients'] if i['name'] == "Egg"]
        self.assertEqual(eggs[0]['count'], 13)

        body = self.client.post('/api/ingredients',
                                json={"name": "Tofu", "count": 2, "servingsPerCount": 4,
                                      "expirationDate": "2024-01-05"}).json()
        tofu = body['state']['ingredients'][0]
        self.assertEqual((tofu['name'], tofu['servingsPerCount'], tofu['expirationDate']), ("Tofu", 4, "2024-01-05"))

        body = self.client.patch(f"/api/ingredients/{tofu['id']}", json={"count": -2}).json()
        self.assertEqual(self.ingredient(body['state'], tofu['id'])['count'], 0)
        body = self.client.delete(f"/api/ingredients/{tofu['id']}").json()
        self.assertTrue(body['applied'])
        self.assertFalse(any(i['id'] == tofu['id'] for i in body['state']['ingredients']))

    def test_receipt_import(self):
        resp = self.client.post('/api/import/receipt', json={"items": [{"name": "Eggs", "count": 6},
                                                                      {"name": "Kale", "category": "Produce"}]})
        state = resp.json()['state']
        self.assertEqual(self.ingredient(state, "ing-egg")['count'], 18)
        kale = next(i for i in state['ingredients'] if i['name'] == "Kale")
        self.assertEqual(kale['count'], 1)

    def test_last_profile_conflict(self):
        resp = self.client.delete('/api/profiles/p-me')
        self.assertEqual(resp.status_code, 409)
        body = self.client.post('/api/profiles', json={"name": "Kid"}).json()
        kid = body['state']['profiles'][-1]
        resp = self.client.delete(f"/api/profiles/{kid['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()['applied'])

    def test_week_navigation(self):
        data = self.client.post('/api/week/shift', json={"delta": 1}).json()
        self.assertEqual(data['weekStartDate'], "2024-01-08")
        self.assertEqual(len(data['plan']['grid']['dinner']), 7)
        data = self.client.post('/api/week/set', json={"weekStartDate": "2024-02-01"}).json()
        self.assertEqual(data['weekStartDate'], "2024-01-29")
        self.assertFalse(self.client.get('/api/state').json()['history']['canUndo'])

    def test_import_export(self):
        exported = self.client.get('/api/export').json()
        self.assertNotIn('history', exported)
        body = self.client.post('/api/import', json={"ingredients": []}).json()
        self.assertFalse(body['applied'])

        exported['ingredients'] = []
        body = self.client.post('/api/import', json=exported).json()
        self.assertTrue(body['applied'])
        self.assertEqual(body['state']['ingredients'], [])

        body = self.client.post('/api/reset-demo').json()
        self.assertEqual(len(body['state']['ingredients']), 12)

    def test_reports_and_events(self):
        self.client.post('/api/slots/drop-meal', json={"address": DINNER_MON, "mealId": "meal-cr"})
        grid = self.client.get('/api/export/grid').json()
        self.assertEqual(grid['weekPlan']['grid']['dinner'][0]['mealName'], "Family: Chicken + Rice")
        nutrition = self.client.get('/api/nutrition').json()
        self.assertEqual(len(nutrition['days']), 7)

        events = self.client.get('/api/events').json()
        self.assertEqual(events['events'][-1]['command'], "drop_meal")
        newer = self.client.get('/api/events', params={"since": events['next_cursor']}).json()
        self.assertEqual(newer['events'], [])

    def test_inventory_view(self):
        self.client.post('/api/inventory/sort', json={"sort": "expiry"})
        data = self.client.get('/api/inventory').json()
        self.assertEqual(data['sort'], "expiry")
        self.assertEqual(len(data['items']), 3)
        self.assertEqual(data['depleted'], [])


if __name__ == '__main__':
    unittest.main()
