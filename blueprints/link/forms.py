from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import Length

class LinkSubmissionForm(FlaskForm):
    # формат ссылки проверяет сам плагин при save()
    link_editor = StringField("Link submission", validators=[Length(max=2048)])
    submit = SubmitField("Save changes")
