"""Sample test code for demos and ``testflow sample``."""

from collections.abc import Mapping
from types import MappingProxyType

from testflow.constants import Framework

SAMPLE_CODECEPTJS = """\
Feature('Login');

Scenario('login and verify dashboard', async ({ I }) => {
  I.amOnPage('/login');
  I.fillField('email', 'user@example.com');
  I.fillField('password', 'secret123');
  I.click('Sign In');
  I.waitForElement('.dashboard');
  I.see('Welcome back');
  I.seeInCurrentUrl('/dashboard');
});"""

SAMPLE_PLAYWRIGHT = """\
import { test, expect } from '@playwright/test';

test('login and verify dashboard', async ({ page }) => {
  await page.goto('https://example.com/login');
  await page.fill('#email', 'user@example.com');
  await page.fill('#password', 'secret123');
  await page.click('button[type="submit"]');
  await page.waitForSelector('.dashboard');
  await expect(page.locator('.welcome')).toBeVisible();
  await expect(page).toHaveURL('/dashboard');
});"""

SAMPLES: Mapping[Framework, str] = MappingProxyType({
    Framework.PLAYWRIGHT: SAMPLE_PLAYWRIGHT,
    Framework.CODECEPTJS: SAMPLE_CODECEPTJS,
})
