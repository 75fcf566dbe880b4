from __future__ import annotations

"""
Unit tests for the Ruby and ERB plugins.

Verifies:
1. require / require_relative / constant extraction through tree-sitter.
2. Rails autoload mapping of constants to files.
3. Gemfile, gemspec and Gemfile.lock gem declarations.
4. ERB tag extraction and render partial lookup.
"""

from scanex.core.languages.erb import KIND_RENDER
from scanex.core.languages.erb import PLUGIN as ERB
from scanex.core.languages.ruby import (
    KIND_CONSTANT,
    KIND_GEM,
    KIND_REQUIRE,
    KIND_REQUIRE_RELATIVE,
    PLUGIN as RUBY,
    scan_lockfile,
    underscore,
)
from scanex.domain.discovery_models import ResolutionContext
from scanex.domain.specifier_models import ClassifiedRef

CONTROLLER = """
require 'json'
require_relative '../lib/helper'

class UsersController < ApplicationController
  def show
    @user = Admin::User.find(params[:id])
    ActiveRecord::Base.logger
  end
end
"""


def test_scan_requires_and_constants() -> None:
    """TC-01: Verify requires, scoped constants and framework exclusions."""
    specs = RUBY.scan(CONTROLLER, "/p/app/controllers/users_controller.rb")

    assert ClassifiedRef(KIND_REQUIRE, "json") in specs
    assert ClassifiedRef(KIND_REQUIRE_RELATIVE, "../lib/helper") in specs
    assert ClassifiedRef(KIND_CONSTANT, "Admin::User") in specs
    assert ClassifiedRef(KIND_CONSTANT, "UsersController") in specs

    values = {s.value for s in specs}
    # Parts of a scoped constant are not reported on their own
    assert "Admin" not in values and "User" not in values
    assert "ApplicationController" not in values
    assert "ActiveRecord::Base" not in values


def test_scan_empty_source() -> None:
    assert RUBY.scan("   \n", "/p/x.rb") == []


def test_underscore_conventions() -> None:
    assert underscore("UserPolicy") == "user_policy"
    assert underscore("Admin::UserPolicy") == "admin/user_policy"
    assert underscore("HTMLParser") == "html_parser"


def test_resolve_constant_via_autoload_dirs(make_project) -> None:
    """TC-02: Verify namespaced, plain and plural constants."""
    root = make_project({
        "app/models/admin/user.rb": "",
        "app/services/billing_service.rb": "",
        "app/models/room.rb": "",
        "app/controllers/users_controller.rb": "",
    })
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "app/controllers/users_controller.rb"))

    assert RUBY.resolve(ClassifiedRef(KIND_CONSTANT, "Admin::User"), ctx) == str(root / "app/models/admin/user.rb")
    assert RUBY.resolve(ClassifiedRef(KIND_CONSTANT, "BillingService"), ctx) == str(root / "app/services/billing_service.rb")
    assert RUBY.resolve(ClassifiedRef(KIND_CONSTANT, "Rooms"), ctx) == str(root / "app/models/room.rb")
    assert RUBY.resolve(ClassifiedRef(KIND_CONSTANT, "Missing"), ctx) is None


def test_resolve_requires(make_project) -> None:
    root = make_project({"lib/helper.rb": "", "lib/tools/fmt.rb": "", "app/main.rb": ""})
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "app/main.rb"))

    assert RUBY.resolve(ClassifiedRef(KIND_REQUIRE_RELATIVE, "../lib/helper"), ctx) == str(root / "lib/helper.rb")
    assert RUBY.resolve(ClassifiedRef(KIND_REQUIRE, "tools/fmt"), ctx) == str(root / "lib/tools/fmt.rb")
    assert RUBY.resolve(ClassifiedRef(KIND_REQUIRE, "json"), ctx) is None


def test_gemfile_and_lockfile() -> None:
    """TC-03: Verify gem declarations from the three manifest forms."""
    gemfile = "source 'https://rubygems.org'\ngem 'rails'\ngem \"my-gem\", path: 'vendor'\n"
    specs = RUBY.scan(gemfile, "/p/Gemfile")
    assert [s.value for s in specs] == ["rails", "my-gem"]
    assert all(s.kind == KIND_GEM for s in specs)

    gemspec = "Gem::Specification.new do |s|\n  s.add_dependency 'rack'\nend\n"
    assert ClassifiedRef(KIND_GEM, "rack") in RUBY.scan(gemspec, "/p/x.gemspec")

    lock = (
        "GEM\n"
        "  remote: https://rubygems.org/\n"
        "  specs:\n"
        "    rails (7.0.0)\n"
        "      actionpack (= 7.0.0)\n"
        "\n"
        "PLATFORMS\n"
        "  ruby (x)\n"
    )
    assert [s.value for s in scan_lockfile(lock)] == ["rails", "actionpack"]


def test_resolve_vendored_gem(make_project) -> None:
    root = make_project({"Gemfile": "", "lib/my_gem.rb": ""})
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "Gemfile"))

    assert RUBY.resolve(ClassifiedRef(KIND_GEM, "my-gem"), ctx) == str(root / "lib/my_gem.rb")
    assert RUBY.resolve(ClassifiedRef(KIND_GEM, "rails"), ctx) is None


def test_erb_scan_skips_comment_tags() -> None:
    """TC-04: Verify extraction from <% %> and <%= %> but not <%# %>."""
    template = (
        "<h1>Users</h1>\n"
        "<%= render 'form' %>\n"
        "<% require 'csv' %>\n"
        "<%# render 'ignored' %>\n"
        "<%= render partial: 'x' %>\n"
    )
    specs = ERB.scan(template, "/p/app/views/users/new.html.erb")

    assert ClassifiedRef(KIND_RENDER, "form") in specs
    assert ClassifiedRef(KIND_REQUIRE, "csv") in specs
    assert ClassifiedRef(KIND_RENDER, "ignored") not in specs


def test_erb_resolves_partials(make_project) -> None:
    """TC-05: Verify local partials and app/views-relative paths."""
    root = make_project({
        "app/views/users/new.html.erb": "",
        "app/views/users/_form.html.erb": "",
        "app/views/shared/_header.html.erb": "",
    })
    ctx = ResolutionContext(project_root=str(root), current_file=str(root / "app/views/users/new.html.erb"))

    assert ERB.resolve(ClassifiedRef(KIND_RENDER, "form"), ctx) == str(root / "app/views/users/_form.html.erb")
    assert ERB.resolve(ClassifiedRef(KIND_RENDER, "shared/header"), ctx) == str(root / "app/views/shared/_header.html.erb")
    assert ERB.resolve(ClassifiedRef(KIND_RENDER, "nope"), ctx) is None
